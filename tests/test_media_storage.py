"""Tests for the R2 media host wrapper, with a mocked boto3 client."""

from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from storefront.utils.media_storage import MediaStorageError, R2MediaStorage


def client_error(operation):
    return ClientError({"Error": {"Code": "500", "Message": "Internal"}}, operation)


@pytest.fixture
def s3_client():
    return MagicMock()


@pytest.fixture
def storage(s3_client):
    return R2MediaStorage(client=s3_client, bucket="storefront", public_url="https://media.test/")


class TestR2MediaStorage:
    def test_upload_puts_object_under_folder(self, storage, s3_client):
        stored = storage.upload(b"\x89PNG", "image/png", "Products")

        assert stored.remote_id.startswith("Products/")
        assert stored.remote_id.endswith(".png")
        assert stored.url == f"https://media.test/{stored.remote_id}"

        kwargs = s3_client.put_object.call_args.kwargs
        assert kwargs["Bucket"] == "storefront"
        assert kwargs["Key"] == stored.remote_id
        assert kwargs["Body"] == b"\x89PNG"
        assert kwargs["ContentType"] == "image/png"

    def test_keys_are_unique(self, storage):
        first = storage.upload(b"a", "image/png", "Products")
        second = storage.upload(b"a", "image/png", "Products")
        assert first.remote_id != second.remote_id

    def test_upload_error(self, storage, s3_client):
        s3_client.put_object.side_effect = client_error("PutObject")
        with pytest.raises(MediaStorageError, match="Upload failed"):
            storage.upload(b"a", "image/png", "Products")

    def test_delete(self, storage, s3_client):
        storage.delete("Products/abc.png")
        s3_client.delete_object.assert_called_once_with(Bucket="storefront", Key="Products/abc.png")

    def test_delete_error(self, storage, s3_client):
        s3_client.delete_object.side_effect = client_error("DeleteObject")
        with pytest.raises(MediaStorageError, match="Delete failed"):
            storage.delete("Products/abc.png")

    def test_as_dict(self, storage):
        stored = storage.upload(b"a", "image/jpeg", "Products")
        assert stored.as_dict() == {"remote_id": stored.remote_id, "url": stored.url}
