"""
Pytest configuration and fixtures for Award Slides tests.
"""

import os
import shutil
import tempfile

import pytest
from botocore.exceptions import NoCredentialsError
from fastapi.testclient import TestClient

# Set test environment variables before importing the app
_DATA_DIR = tempfile.mkdtemp(prefix="awards_test_data_")
os.environ["AWARDS_API_TOKEN"] = "test-token-12345"
os.environ["AWARDS_DB_PATH"] = os.path.join(_DATA_DIR, "awards.db")
os.environ["AWARDS_BUCKET_NAME"] = "test-awards-bucket"

from award_slides.client import AwardsApiClient
from award_slides.errors import StorageError
from award_slides.kv_store import KeyValueStore
from award_slides.main import app, get_photo_storage, get_repository
from award_slides.models import Awardee
from award_slides.repository import AwardeeRepository
from award_slides.storage import PhotoStorage

API_TOKEN = "test-token-12345"


class FakePhotoStorage:
    """In-memory stand-in for the S3 bucket."""

    def __init__(self):
        self.objects = {}
        self.removed = []
        self.bucket_created = False
        self.fail_uploads = False
        self.fail_signing = False

    def ensure_bucket(self):
        created = not self.bucket_created
        self.bucket_created = True
        return created

    def upload(self, filename, data, content_type=None):
        if self.fail_uploads:
            raise StorageError("upload refused")
        self.objects[filename] = (data, content_type)
        return filename

    def signed_url(self, path, expires_in=3600):
        if self.fail_signing:
            raise StorageError("signing refused")
        return f"https://storage.test/{path}?expires={expires_in}"

    def remove(self, path):
        self.removed.append(path)
        self.objects.pop(path, None)


class CredentialFreeS3Client:
    """S3 client stand-in that fails like boto3 with no credentials configured."""

    def head_bucket(self, **kwargs):
        raise NoCredentialsError()


@pytest.fixture(scope="session", autouse=True)
def test_dirs():
    """Cleanup the test data directory after all tests."""
    yield _DATA_DIR
    shutil.rmtree(_DATA_DIR, ignore_errors=True)


@pytest.fixture
def photo_storage():
    return FakePhotoStorage()


@pytest.fixture
def credential_free_storage():
    return PhotoStorage("test-awards-bucket", client=CredentialFreeS3Client())


@pytest.fixture
def kv_store(tmp_path):
    return KeyValueStore(tmp_path / "kv.db")


@pytest.fixture
def repository(kv_store, photo_storage):
    return AwardeeRepository(kv_store, photo_storage)


@pytest.fixture
def client(repository, photo_storage):
    """Create an authorized test client backed by a fresh store."""
    app.dependency_overrides[get_photo_storage] = lambda: photo_storage
    app.dependency_overrides[get_repository] = lambda: repository
    yield TestClient(app, headers={"Authorization": f"Bearer {API_TOKEN}"})
    app.dependency_overrides.clear()


@pytest.fixture
def anonymous_client(repository, photo_storage):
    """Test client that sends no Authorization header."""
    app.dependency_overrides[get_photo_storage] = lambda: photo_storage
    app.dependency_overrides[get_repository] = lambda: repository
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def api_client(client):
    """Editor-side API client talking to the app in-process."""
    return AwardsApiClient(token=API_TOKEN, http=client)


@pytest.fixture
def sample_awardees():
    return [
        Awardee(id=1, name="Ada", title="Engineer", category="Act as Owner", photo="https://img.test/1.png"),
        Awardee(id=2, name="Grace", title="Admiral", category="Leadership", photo="https://img.test/2.png"),
        Awardee(id=3, name="Linus", title="Maintainer", category="Celebrate Success", photo="https://img.test/3.png"),
        Awardee(id=4, name="Barbara", title="Professor", category="Emerging Talent", photo="https://img.test/4.png"),
    ]
