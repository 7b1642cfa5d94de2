"""Object store client adapter over the boto3 S3 API."""

from __future__ import annotations

import base64
import hashlib
from typing import Iterator, NoReturn

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from assetstore.base.access import AccessDescriptor
from assetstore.base.config import S3ProviderConfig
from assetstore.base.exceptions import (
    AuthenticationError,
    BucketNotFoundError,
    IntegrityError,
    KeyNotFoundError,
    ObjectAlreadyExistsError,
    TransportError,
)
from assetstore.base.types import ObjectSummary

_ERROR_MAP = {
    "NoSuchBucket": BucketNotFoundError,
    "NoSuchKey": KeyNotFoundError,
    "404": KeyNotFoundError,
    "NotFound": KeyNotFoundError,
    "AccessDenied": AuthenticationError,
    "InvalidAccessKeyId": AuthenticationError,
    "SignatureDoesNotMatch": AuthenticationError,
}

# Retries belong to botocore, not to this adapter.
_RETRIES = {"max_attempts": 5, "mode": "standard"}


def _handle_error(e: Exception, message: str) -> NoReturn:
    """Raise a mapped TransportError carrying the backend's diagnostic."""
    if isinstance(e, ClientError):
        error = e.response.get("Error", {})
        code = str(error.get("Code", ""))
        detail = error.get("Message") or code
        exc_class = _ERROR_MAP.get(code, TransportError)
        raise exc_class(f"{message} {detail}", code=code or None) from e
    raise TransportError(f"{message} {e}") from e


def _content_md5(data: bytes) -> str:
    return base64.b64encode(hashlib.md5(data).digest()).decode("ascii")


def _verify_etag(data: bytes, etag: str | None) -> bool:
    """Compare a payload with a single-part ETag (its MD5 hex digest).

    Multipart ETags (``<hash>-<parts>``) are not payload digests and
    cannot be checked here; they are accepted as is.
    """
    if not etag:
        return True
    etag = etag.strip('"')
    if "-" in etag:
        return True
    return hashlib.md5(data).hexdigest() == etag


class S3ObjectStoreClient:
    """Primitive S3 operations keyed by (bucket, key).

    Owns no naming or access policy; every method maps to one S3 call,
    except :meth:`move_object` (copy, then delete the source).

    Attributes:
        client: boto3 S3 client for interacting with the AWS S3 API.
        region: AWS region name.
    """

    def __init__(self, config: S3ProviderConfig) -> None:
        """Initialize the boto3 S3 client.

        Args:
            config: Provider configuration holding credentials, region and
                an optional custom endpoint.
        """
        self.client = boto3.client(
            "s3",
            aws_access_key_id=config.access_key,
            aws_secret_access_key=config.secret_key,
            region_name=config.region,
            endpoint_url=config.endpoint_url,
            config=Config(retries=_RETRIES),
        )
        self.region = config.region

    # --- Bucket operations ---

    def list_buckets(self) -> list[str]:
        """List all buckets owned by the authenticated account.

        Raises:
            TransportError: If listing fails (bad credentials included).
        """
        try:
            response = self.client.list_buckets()
            return [bucket["Name"] for bucket in response.get("Buckets", [])]
        except (ClientError, BotoCoreError) as e:
            _handle_error(e, "Failed to list buckets.")

    def bucket_exists(self, bucket: str) -> bool:
        """Return whether *bucket* exists and is reachable.

        Raises:
            TransportError: For failures other than a missing bucket.
        """
        try:
            self.client.head_bucket(Bucket=bucket)
            return True
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in ("404", "NoSuchBucket", "NotFound"):
                return False
            _handle_error(e, f"Failed to check bucket '{bucket}'.")
        except BotoCoreError as e:
            _handle_error(e, f"Failed to check bucket '{bucket}'.")

    # --- Object operations ---

    def list_by_prefix(
        self,
        bucket: str,
        prefix: str = "",
        delimiter: str = "/",
        max_results: int | None = None,
    ) -> Iterator[ObjectSummary]:
        """Lazily list objects under *prefix*.

        With a delimiter, keys nested deeper than the prefix are grouped
        into common prefixes by S3 and are not yielded.

        Args:
            bucket: Bucket to list.
            prefix: Key prefix filter.
            delimiter: Grouping delimiter; empty lists recursively.
            max_results: Stop after this many keys.

        Yields:
            One :class:`ObjectSummary` per key, page by page.

        Raises:
            TransportError: If a page cannot be fetched.
        """
        params: dict = {"Bucket": bucket, "Prefix": prefix}
        if delimiter:
            params["Delimiter"] = delimiter
        if max_results is not None:
            params["PaginationConfig"] = {"MaxItems": max_results}
        try:
            paginator = self.client.get_paginator("list_objects_v2")
            for page in paginator.paginate(**params):
                for obj in page.get("Contents", []):
                    yield ObjectSummary(
                        key=obj["Key"],
                        size=int(obj.get("Size", 0)),
                        last_modified=obj.get("LastModified"),
                    )
        except (ClientError, BotoCoreError) as e:
            _handle_error(e, f"Failed to list '{prefix}' in '{bucket}'.")

    def get_bytes(self, bucket: str, key: str) -> bytes:
        """Fetch an object's bytes and verify them against its ETag.

        Raises:
            KeyNotFoundError: If the key does not exist.
            IntegrityError: If the payload does not match its ETag.
            TransportError: If retrieval fails for any other reason.
        """
        try:
            response = self.client.get_object(Bucket=bucket, Key=key)
            data = response["Body"].read()
        except (ClientError, BotoCoreError) as e:
            _handle_error(e, f"Failed to get '{key}' from '{bucket}'.")
        if not _verify_etag(data, response.get("ETag")):
            raise IntegrityError(f"Checksum mismatch for '{key}' in '{bucket}'.")
        return data  # type: ignore[no-any-return]

    def put_bytes(
        self, bucket: str, key: str, data: bytes, access: AccessDescriptor
    ) -> None:
        """Upload *data*, unconditionally replacing any existing object.

        Raises:
            TransportError: If the upload fails.
        """
        try:
            self.client.put_object(
                Bucket=bucket,
                Key=key,
                Body=data,
                ContentMD5=_content_md5(data),
                ACL=access.acl,
                StorageClass=access.storage_class,
            )
        except (ClientError, BotoCoreError) as e:
            _handle_error(e, f"Failed to put '{key}' to '{bucket}'.")

    def delete_object(self, bucket: str, key: str) -> None:
        """Delete an object.

        Raises:
            TransportError: If the store reports a failure.
        """
        try:
            self.client.delete_object(Bucket=bucket, Key=key)
        except (ClientError, BotoCoreError) as e:
            _handle_error(e, f"Failed to delete '{key}' from '{bucket}'.")

    def copy_object(
        self,
        source_bucket: str,
        source_key: str,
        destination_bucket: str,
        destination_key: str,
        access: AccessDescriptor,
        overwrite: bool = True,
    ) -> None:
        """Server-side copy applying *access* to the destination.

        Raises:
            ObjectAlreadyExistsError: If the destination exists and
                *overwrite* is false.
            TransportError: If the copy fails.
        """
        if not overwrite and self._key_exists(destination_bucket, destination_key):
            raise ObjectAlreadyExistsError(
                f"'{destination_key}' already exists in '{destination_bucket}'."
            )
        try:
            self.client.copy_object(
                Bucket=destination_bucket,
                Key=destination_key,
                CopySource={"Bucket": source_bucket, "Key": source_key},
                ACL=access.acl,
                StorageClass=access.storage_class,
                MetadataDirective="COPY",
            )
        except (ClientError, BotoCoreError) as e:
            _handle_error(
                e, f"Failed to copy '{source_key}' to '{destination_key}'."
            )

    def move_object(
        self, bucket: str, source_key: str, destination_key: str, access: AccessDescriptor
    ) -> None:
        """Copy then delete the source; the source is gone on success.

        Moving a key onto itself is a no-op.

        Raises:
            TransportError: If either step fails. A failed copy leaves the
                source untouched.
        """
        if source_key == destination_key:
            return
        self.copy_object(bucket, source_key, bucket, destination_key, access)
        self.delete_object(bucket, source_key)

    def _key_exists(self, bucket: str, key: str) -> bool:
        try:
            self.client.head_object(Bucket=bucket, Key=key)
            return True
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in ("404", "NoSuchKey", "NotFound"):
                return False
            _handle_error(e, f"Failed to check '{key}' in '{bucket}'.")
        except BotoCoreError as e:
            _handle_error(e, f"Failed to check '{key}' in '{bucket}'.")
