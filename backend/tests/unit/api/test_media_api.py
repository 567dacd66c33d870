"""
Unit Tests for Media API Endpoints
"""
from unittest.mock import MagicMock
import pytest
from httpx import AsyncClient

from app.api.v1.endpoints.media import get_media_service
from app.main import app
from app.services.media_service import MediaService
from app.services.storage_service import StorageService


@pytest.fixture
def s3_client():
    client = MagicMock()
    client.put_object.return_value = {'ETag': '"etag"'}
    client.generate_presigned_url.return_value = 'https://signed.example/key'
    return client


@pytest.fixture
def media_client(client: AsyncClient, db_session, s3_client) -> AsyncClient:
    storage = StorageService(client=s3_client, bucket_name='test-bucket')
    app.dependency_overrides[get_media_service] = lambda: MediaService(db_session, storage)
    return client


class TestMediaUpload:

    @pytest.mark.asyncio
    async def test_upload_requires_authentication(self, media_client: AsyncClient):
        response = await media_client.post(
            '/api/v1/media/upload',
            files={'file': ('logo.png', b'png-bytes', 'image/png')}
        )

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_upload_success(self, media_client: AsyncClient, editor_auth_headers, editor_user):
        response = await media_client.post(
            '/api/v1/media/upload',
            files={'file': ('logo.png', b'png-bytes', 'image/png')},
            data={'folder': 'logos', 'title': 'Office logo', 'tags': 'brand, header,'},
            headers=editor_auth_headers
        )

        assert response.status_code == 201
        data = response.json()['data']
        assert data['file_name'].startswith('logos/')
        assert data['category'] == 'image'
        assert data['tags'] == ['brand', 'header']
        assert data['uploaded_by'] == str(editor_user.id)
        assert data['size'] == len(b'png-bytes')

    @pytest.mark.asyncio
    async def test_upload_validation_failure(self, media_client: AsyncClient, editor_auth_headers, s3_client):
        response = await media_client.post(
            '/api/v1/media/upload',
            files={'file': ('run.sh', b'echo', 'text/x-shellscript')},
            headers=editor_auth_headers
        )

        assert response.status_code == 400
        error = response.json()['error']
        assert error['code'] == 'FILE_VALIDATION_FAILED'
        assert error['details']['errors'][0]['code'] == 'UNSUPPORTED_FILE_TYPE'
        s3_client.put_object.assert_not_called()


class TestPresignedUrl:

    @pytest.mark.asyncio
    async def test_presigned_url(self, media_client: AsyncClient, editor_auth_headers):
        upload = await media_client.post(
            '/api/v1/media/upload',
            files={'file': ('photo.jpg', b'jpeg', 'image/jpeg')},
            headers=editor_auth_headers
        )
        media_id = upload.json()['data']['id']

        response = await media_client.get(
            f'/api/v1/media/{media_id}/presigned-url?operation=put&expires_in=600',
            headers=editor_auth_headers
        )

        assert response.status_code == 200
        assert response.json()['data'] == {
            'url': 'https://signed.example/key',
            'operation': 'put',
            'expires_in': 600,
        }

    @pytest.mark.asyncio
    async def test_unknown_media_is_404(self, media_client: AsyncClient, editor_auth_headers):
        response = await media_client.get(
            '/api/v1/media/00000000-0000-0000-0000-000000000000/presigned-url',
            headers=editor_auth_headers
        )

        assert response.status_code == 404
        assert response.json()['error']['code'] == 'MEDIA_NOT_FOUND'
