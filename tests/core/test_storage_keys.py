"""Test suite for storage key generation."""

import uuid

import pytest

from upload_tracker.core.storage_keys import DEFAULT_NAME, build_storage_key, sanitize_name


class TestSanitizeName:
    """Test suite for sanitize_name()."""

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("IMG_0001.JPG", "img_0001.jpg"),
            ("my photo (1).png", "my_photo__1_.png"),
            ("../../etc/passwd", ".._.._etc_passwd"),
            ("résumé.pdf", "r_sum_.pdf"),
            ("a-b_c.d", "a-b_c.d"),
        ],
    )
    def test_unsafe_characters_replaced(self, name: str, expected: str) -> None:
        assert sanitize_name(name) == expected

    @pytest.mark.parametrize("name", ["", "   ", "..", "."])
    def test_degenerate_names_fall_back(self, name: str) -> None:
        assert sanitize_name(name) == DEFAULT_NAME

    def test_no_path_separator_survives(self) -> None:
        assert "/" not in sanitize_name("a/b\\c")


class TestBuildStorageKey:
    """Test suite for build_storage_key()."""

    def test_key_layout(self) -> None:
        job_id, item_id = uuid.uuid4(), uuid.uuid4()

        key = build_storage_key("uploads", job_id, item_id, "Cat.JPG")

        assert key == f"uploads/{job_id}/{item_id}-cat.jpg"

    def test_prefix_slashes_ignored(self) -> None:
        job_id, item_id = uuid.uuid4(), uuid.uuid4()

        assert build_storage_key("/uploads/", job_id, item_id, "a") == f"uploads/{job_id}/{item_id}-a"
        assert build_storage_key("", job_id, item_id, "a") == f"{job_id}/{item_id}-a"

    def test_same_name_distinct_items_get_distinct_keys(self) -> None:
        job_id = uuid.uuid4()

        keys = {build_storage_key("uploads", job_id, uuid.uuid4(), "same.jpg") for _ in range(50)}

        assert len(keys) == 50
