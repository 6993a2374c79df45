"""
S3 client for the uploads bucket.

Issues time-limited write permissions (presigned PUT URLs) for direct
client uploads. Does NOT transfer bytes; the client uploads straight to S3.

Dependencies: boto3, botocore
System role: Object-store capability used by batch issuance
"""

from datetime import datetime, timedelta, timezone

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from upload_tracker.core.exceptions import WritePermissionError


class S3UploadClient:
    """S3 client for the uploads bucket (presigned write URLs only)."""

    def __init__(
        self,
        bucket: str,
        region: str = "us-east-1",
        endpoint_url: str | None = None,
    ) -> None:
        """
        Initialize S3 client for the uploads bucket.

        Args:
            bucket: S3 bucket name receiving uploads
            region: AWS region for S3 bucket
            endpoint_url: Optional S3-compatible endpoint (MinIO, LocalStack)
        """
        self._bucket = bucket
        self._region = region
        self._s3_client = boto3.client(
            "s3",
            region_name=region,
            endpoint_url=endpoint_url,
            config=Config(signature_version="s3v4"),
        )

    @property
    def bucket(self) -> str:
        return self._bucket

    def issue_write_permission(
        self,
        storage_key: str,
        content_type: str = "application/octet-stream",
        expires_in: int = 3600,
    ) -> tuple[str, datetime]:
        """
        Generate presigned URL for uploading one object.

        Signing happens locally from the configured credentials; no request
        reaches S3.

        Args:
            storage_key: S3 object key (path in bucket)
            content_type: MIME type the upload must declare
            expires_in: URL expiry in seconds (default 1 hour)

        Returns:
            tuple[str, datetime]: (presigned_url, expires_at)

        Raises:
            WritePermissionError: If presigned URL generation fails
        """
        try:
            presigned_url = self._s3_client.generate_presigned_url(
                ClientMethod="put_object",
                Params={
                    "Bucket": self._bucket,
                    "Key": storage_key,
                    "ContentType": content_type,
                },
                ExpiresIn=expires_in,
            )
        except (ClientError, BotoCoreError) as e:
            raise WritePermissionError(
                f"Failed to sign upload URL: {e}",
                storage_key=storage_key,
                details={"bucket": self._bucket},
            ) from e

        expires_at = datetime.now(timezone.utc) + timedelta(seconds=expires_in)
        return presigned_url, expires_at
