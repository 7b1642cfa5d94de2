import asyncio
from datetime import datetime, timezone
from unittest.mock import patch, MagicMock

import pytest
from botocore.exceptions import ClientError

from assetstore.aws.provider import S3StorageProvider
from assetstore.base import StorageProviderBlueprint
from assetstore.base.access import AccessDescriptor
from assetstore.base.config import S3ProviderConfig
from assetstore.base.exceptions import (
    BucketNotFoundError,
    IntegrityError,
    KeyNotFoundError,
    ObjectNotFoundError,
    TransportError,
)
from assetstore.base.types import ListEntry, ObjectInfo, ObjectSummary

NOW = datetime(2024, 5, 1, tzinfo=timezone.utc)


def _client_error(code: str) -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": "err"}}, "op")


class FakeObjectStore:
    """Dict-backed stand-in for S3ObjectStoreClient."""

    def __init__(self) -> None:
        self.objects: dict[str, tuple[bytes, AccessDescriptor]] = {}

    def list_by_prefix(self, bucket, prefix="", delimiter="/", max_results=None):
        for key in sorted(self.objects):
            rest = key[len(prefix):]
            if not key.startswith(prefix) or (delimiter and delimiter in rest):
                continue
            yield ObjectSummary(key, len(self.objects[key][0]), NOW)

    def get_bytes(self, bucket, key):
        if key not in self.objects:
            raise KeyNotFoundError(f"No such key '{key}'", code="NoSuchKey")
        return self.objects[key][0]

    def put_bytes(self, bucket, key, data, access):
        self.objects[key] = (data, access)

    def delete_object(self, bucket, key):
        self.objects.pop(key, None)

    def move_object(self, bucket, source_key, destination_key, access):
        if source_key not in self.objects:
            raise KeyNotFoundError(f"No such key '{source_key}'", code="NoSuchKey")
        data, _ = self.objects.pop(source_key)
        self.objects[destination_key] = (data, access)


CONFIG = S3ProviderConfig(bucket="acme", access_key="AK", secret_key="SK", region="us-west-1")


@pytest.fixture
def fake():
    return FakeObjectStore()


@pytest.fixture
def provider(fake):
    return S3StorageProvider(CONFIG, client=fake)


@pytest.fixture
def mocked():
    client = MagicMock()
    return S3StorageProvider(CONFIG, client=client), client


class TestConstruction:
    def test_is_blueprint(self, provider):
        assert isinstance(provider, StorageProviderBlueprint)

    def test_builds_client_from_config(self):
        with patch("assetstore.aws.client.boto3") as mock_boto:
            provider = S3StorageProvider(CONFIG)
            assert provider.client.client is mock_boto.client.return_value

    def test_config_is_read_only(self, provider):
        with pytest.raises(AttributeError):
            provider.config = CONFIG
        with pytest.raises(Exception):
            provider.config.bucket = "other"


class TestList:
    def test_direct_children_only(self, provider, fake):
        fake.objects["public/docs/a.txt"] = (b"abc", None)
        fake.objects["public/docs/sub/b.txt"] = (b"abc", None)
        fake.objects["public/docsx.txt"] = (b"abc", None)
        entries = provider.list("Docs")
        assert entries == [ListEntry(name="a.txt", directory="docs", size=3, last_modified=NOW)]

    def test_excludes_zero_size(self, provider, fake):
        fake.objects["public/x"] = (b"", None)
        fake.objects["public/y"] = (b"0123456789", None)
        assert [e.name for e in provider.list("")] == ["y"]

    def test_private_namespace(self, provider, fake):
        fake.objects["public/a.txt"] = (b"1", None)
        fake.objects["private/b.txt"] = (b"1", None)
        assert [e.name for e in provider.list(private=True)] == ["b.txt"]

    def test_empty(self, provider):
        assert provider.list("nothing/here") == []

    def test_lists_with_delimiter(self, mocked):
        provider, client = mocked
        client.list_by_prefix.return_value = iter([])
        provider.list("/Docs")
        client.list_by_prefix.assert_called_once_with("acme", "public/docs/", delimiter="/")

    def test_propagates_transport_error(self, mocked):
        provider, client = mocked
        client.list_by_prefix.side_effect = BucketNotFoundError("gone")
        with pytest.raises(TransportError):
            provider.list()


class TestInspect:
    def test_found(self, provider, fake):
        fake.objects["public/docs/a.txt"] = (b"abcd", None)
        assert provider.inspect("Docs/A.txt") == ObjectInfo(size=4, last_modified=NOW)

    def test_trashed_keeps_case(self, provider, fake):
        fake.objects[".trash/Docs/A.txt"] = (b"abcd", None)
        assert provider.inspect("Docs/A.txt", trashed=True) is not None
        assert provider.inspect("docs/a.txt", trashed=True) is None

    def test_missing_returns_none(self, provider):
        assert provider.inspect("missing.txt") is None

    def test_transport_error_degrades_to_none(self, mocked):
        provider, client = mocked
        client.list_by_prefix.side_effect = BucketNotFoundError("no such bucket")
        assert provider.inspect("a.txt") is None

    def test_lists_parent_prefix(self, mocked):
        provider, client = mocked
        client.list_by_prefix.return_value = iter([])
        provider.inspect("docs/a.txt", private=True)
        client.list_by_prefix.assert_called_once_with("acme", "private/docs/", delimiter="/")


class TestExists:
    def test_true(self, provider, fake):
        fake.objects["private/a.txt"] = (b"1", None)
        assert provider.exists("a.txt", private=True)

    def test_false(self, provider):
        assert not provider.exists("a.txt")

    def test_false_on_transport_error(self, mocked):
        provider, client = mocked
        client.list_by_prefix.side_effect = TransportError("timeout")
        assert provider.exists("a.txt") is False


class TestRead:
    def test_success(self, provider, fake):
        fake.objects["public/a.txt"] = (b"payload", None)
        assert provider.read("A.TXT") == b"payload"

    def test_missing(self, provider):
        with pytest.raises(ObjectNotFoundError):
            provider.read("missing.txt")

    def test_integrity_failure_is_not_found(self, mocked):
        provider, client = mocked
        client.get_bytes.side_effect = IntegrityError("checksum mismatch")
        with pytest.raises(ObjectNotFoundError) as exc_info:
            provider.read("a.txt")
        assert isinstance(exc_info.value.__cause__, IntegrityError)

    def test_reads_trash(self, mocked):
        provider, client = mocked
        client.get_bytes.return_value = b"x"
        provider.read("Docs/A.txt", trashed=True)
        client.get_bytes.assert_called_once_with("acme", ".trash/Docs/A.txt")


class TestWrite:
    def test_public(self, provider, fake):
        provider.write(b"data", "/Docs/A.txt")
        data, access = fake.objects["public/docs/a.txt"]
        assert data == b"data"
        assert access.acl == "public-read"

    def test_private(self, provider, fake):
        provider.write(b"data", "a.txt", private=True)
        assert fake.objects["private/a.txt"][1].acl == "private"

    def test_overwrites(self, provider, fake):
        provider.write(b"one", "a.txt")
        provider.write(b"two", "a.txt")
        assert provider.read("a.txt") == b"two"

    def test_propagates_transport_error(self, mocked):
        provider, client = mocked
        client.put_bytes.side_effect = TransportError("denied")
        with pytest.raises(TransportError):
            provider.write(b"x", "a.txt")


class TestDelete:
    def test_live(self, provider, fake):
        fake.objects["public/a.txt"] = (b"1", None)
        provider.delete("a.txt")
        assert "public/a.txt" not in fake.objects

    def test_trashed(self, mocked):
        provider, client = mocked
        provider.delete("Docs/A.txt", trashed=True)
        client.delete_object.assert_called_once_with("acme", ".trash/Docs/A.txt")

    def test_propagates_transport_error(self, mocked):
        provider, client = mocked
        client.delete_object.side_effect = TransportError("denied")
        with pytest.raises(TransportError):
            provider.delete("a.txt")


class TestSoftDelete:
    def test_moves_to_trash(self, provider, fake):
        provider.write(b"data", "Docs/A.txt", private=True)
        token = provider.soft_delete("Docs/A.txt", private=True)
        assert token == "Docs/A.txt"
        assert "private/docs/a.txt" not in fake.objects
        data, access = fake.objects[".trash/Docs/A.txt"]
        assert data == b"data"
        assert access.acl == "private"
        assert access.storage_class == "REDUCED_REDUNDANCY"

    def test_single_move_call(self, mocked):
        provider, client = mocked
        provider.soft_delete("a.txt")
        client.move_object.assert_called_once()
        client.copy_object.assert_not_called()

    def test_missing_source_propagates(self, provider):
        with pytest.raises(TransportError):
            provider.soft_delete("missing.txt")


class TestRestore:
    def test_round_trip(self, provider, fake):
        provider.write(b"bytes", "a/b.txt")
        token = provider.soft_delete("a/b.txt")
        assert provider.restore(token, "a/b.txt") is True
        assert provider.read("a/b.txt") == b"bytes"
        assert not provider.exists("a/b.txt", trashed=True)
        assert fake.objects["public/a/b.txt"][1].acl == "public-read"

    def test_rename_into_private(self, provider, fake):
        fake.objects[".trash/Old.txt"] = (b"1", None)
        provider.restore("Old.txt", "New.txt", private=True)
        assert list(fake.objects) == ["private/new.txt"]
        assert fake.objects["private/new.txt"][1].storage_class == "STANDARD"

    def test_propagates_transport_error(self, mocked):
        provider, client = mocked
        client.move_object.side_effect = KeyNotFoundError("gone")
        with pytest.raises(TransportError):
            provider.restore("a.txt", "a.txt")


class TestMove:
    def test_across_visibility(self, provider, fake):
        fake.objects["public/a.txt"] = (b"1", None)
        assert provider.move("a.txt", "Dir/B.txt", new_is_private=True) is True
        assert list(fake.objects) == ["private/dir/b.txt"]
        assert fake.objects["private/dir/b.txt"][1].acl == "private"

    def test_private_to_public(self, mocked):
        provider, client = mocked
        provider.move("a.txt", "b.txt", original_is_private=True)
        bucket, source, destination, access = client.move_object.call_args.args
        assert (bucket, source, destination) == ("acme", "private/a.txt", "public/b.txt")
        assert access.acl == "public-read"

    @patch("assetstore.aws.client.boto3")
    def test_case_only_rename_leaves_object(self, mock_boto):
        boto_client = MagicMock()
        mock_boto.client.return_value = boto_client
        provider = S3StorageProvider(CONFIG)
        assert provider.move("Docs/A.txt", "docs/a.txt") is True
        boto_client.copy_object.assert_not_called()
        boto_client.delete_object.assert_not_called()


class TestPublicUrl:
    def test_default_root_url(self, provider):
        assert provider.public_url("/Docs/A.txt") == (
            "https://acme.s3.us-west-1.amazonaws.com/public/docs/a.txt"
        )

    def test_custom_root_url(self):
        config = S3ProviderConfig(
            bucket="acme", access_key="AK", secret_key="SK",
            root_url="https://cdn.example.com/", subpath="site",
        )
        provider = S3StorageProvider(config, client=MagicMock())
        assert provider.public_url("a.txt") == "https://cdn.example.com/site/public/a.txt"

    def test_disabled(self):
        config = S3ProviderConfig(bucket="acme", access_key="AK", secret_key="SK", root_url="")
        client = MagicMock()
        assert S3StorageProvider(config, client=client).public_url("a.txt") == ""
        assert client.method_calls == []


class TestAsyncVariants:
    def test_aread(self, provider, fake):
        fake.objects["public/a.txt"] = (b"async", None)
        assert asyncio.run(provider.aread("a.txt")) == b"async"

    def test_aexists(self, provider):
        assert asyncio.run(provider.aexists("a.txt")) is False

    def test_no_async_classmethod(self):
        assert not hasattr(S3StorageProvider, "avalidate_configuration")


class TestValidateConfiguration:
    @pytest.fixture
    def boto(self):
        with patch("assetstore.aws.client.boto3") as mock_boto:
            mock_client = MagicMock()
            mock_boto.client.return_value = mock_client
            yield mock_client

    def test_valid(self, boto):
        boto.list_buckets.return_value = {"Buckets": [{"Name": "acme"}]}
        paginator = MagicMock()
        paginator.paginate.return_value = [{"Contents": []}]
        boto.get_paginator.return_value = paginator
        report = S3StorageProvider.validate_configuration(CONFIG)
        assert report.ok

    def test_invalid_bucket(self, boto):
        boto.list_buckets.return_value = {"Buckets": []}
        paginator = MagicMock()
        paginator.paginate.side_effect = _client_error("NoSuchBucket")
        boto.get_paginator.return_value = paginator
        report = S3StorageProvider.validate_configuration(
            {"bucket": "acme", "access_key": "AK", "secret_key": "SK"}
        )
        assert report.fields() == ["bucket"]
        assert "access_key" not in report.as_dict()

    def test_bad_credentials_short_circuit(self, boto):
        boto.list_buckets.side_effect = _client_error("InvalidAccessKeyId")
        report = S3StorageProvider.validate_configuration(CONFIG)
        assert report.fields() == ["access_key"]
        boto.get_paginator.assert_not_called()

    def test_malformed_config_never_raises(self, monkeypatch):
        monkeypatch.delenv("AWS_ACCESS_KEY_ID", raising=False)
        monkeypatch.delenv("AWS_SECRET_ACCESS_KEY", raising=False)
        report = S3StorageProvider.validate_configuration({"bucket": "acme"})
        assert set(report.fields()) == {"access_key", "secret_key"}

    def test_non_mapping_config_never_raises(self):
        report = S3StorageProvider.validate_configuration(None)
        assert report.fields() == ["config"]
        assert "NoneType" in report.as_dict()["config"]

    def test_raise_for_errors(self, boto):
        boto.list_buckets.side_effect = _client_error("AccessDenied")
        report = S3StorageProvider.validate_configuration(CONFIG)
        with pytest.raises(Exception, match="access_key"):
            report.raise_for_errors()
