"""
Unit Tests for MediaService and StorageService
Tests for: file validation, object keys, uploads, presigned URLs
"""
import re
from unittest.mock import AsyncMock, MagicMock
import pytest
from botocore.exceptions import ClientError

from app.core.exceptions import MediaNotFoundError, MediaValidationError, PresignedUrlError, StorageUploadError
from app.models.media import MediaCategory, MediaFolder
from app.schemas.media import MediaUploadMetadata
from app.services.media_service import (
    MB,
    MediaService,
    UploadedFile,
    determine_category,
    generate_object_key,
    get_file_type_rule,
    validate_file,
)
from app.services.storage_service import StorageService


@pytest.fixture
def s3_client():
    client = MagicMock()
    client.put_object.return_value = {'ETag': '"abc123"'}
    client.generate_presigned_url.return_value = 'https://signed.example/object?sig=1'
    return client


@pytest.fixture
def storage(s3_client) -> StorageService:
    return StorageService(client=s3_client, bucket_name='test-bucket')


def _png(size: int = 1024) -> UploadedFile:
    return UploadedFile(filename='Office Photo (1).png', content_type='image/png', content=b'x' * size)


class TestValidation:

    def test_image_in_any_folder_is_valid(self):
        assert validate_file(_png(), 'sliders') == []
        assert validate_file(_png(), 'general') == []

    def test_unsupported_type_stops_further_checks(self):
        file = UploadedFile(filename='tool.exe', content_type='application/x-msdownload', content=b'x')

        errors = validate_file(file, 'nonsense')

        assert [e['code'] for e in errors] == ['UNSUPPORTED_FILE_TYPE']
        assert errors[0]['field'] == 'mimetype'

    def test_size_and_folder_errors_are_both_reported(self):
        file = UploadedFile(filename='report.pdf', content_type='application/pdf', content=b'x' * (10 * MB + 1))

        errors = validate_file(file, 'sliders')

        assert [e['code'] for e in errors] == ['FILE_SIZE_EXCEEDED', 'INCOMPATIBLE_FOLDER']

    def test_pdf_at_limit_is_accepted(self):
        file = UploadedFile(filename='report.pdf', content_type='application/pdf', content=b'x' * (10 * MB))

        assert validate_file(file, 'documents') == []

    def test_unlisted_types_fall_back_by_family(self):
        assert get_file_type_rule('image/avif').max_size == 50 * MB
        assert get_file_type_rule('audio/flac').max_size == 20 * MB
        assert get_file_type_rule('text/plain') is None

    @pytest.mark.parametrize('mime_type,category', [
        ('image/png', MediaCategory.IMAGE),
        ('video/mp4', MediaCategory.VIDEO),
        ('audio/mpeg', MediaCategory.AUDIO),
        ('application/pdf', MediaCategory.DOCUMENT),
        ('text/csv', MediaCategory.OTHER),
    ])
    def test_determine_category(self, mime_type, category):
        assert determine_category(mime_type) == category

    def test_object_key_format(self):
        key = generate_object_key('Office Photo (1).png', 'sliders')

        assert re.fullmatch(r'sliders/\d{13}-[0-9a-f]{12}-Office_Photo__1_\.png', key)

    def test_object_keys_are_unique(self):
        keys = {generate_object_key('a.png', 'general') for _ in range(20)}

        assert len(keys) == 20


class TestStorageService:

    @pytest.mark.asyncio
    async def test_upload_bytes(self, storage: StorageService, s3_client):
        result = await storage.upload_bytes('general/a.png', b'data', 'image/png', {'folder': 'general'})

        assert result['key'] == 'general/a.png'
        assert result['size_bytes'] == 4
        assert result['etag'] == 'abc123'
        assert result['content_hash'] == StorageService.calculate_hash(b'data')
        kwargs = s3_client.put_object.call_args.kwargs
        assert kwargs['Bucket'] == 'test-bucket'
        assert kwargs['Metadata']['folder'] == 'general'

    @pytest.mark.asyncio
    async def test_upload_failure_raises(self, storage: StorageService, s3_client):
        s3_client.put_object.side_effect = ClientError({'Error': {'Code': '500', 'Message': 'boom'}}, 'PutObject')

        with pytest.raises(StorageUploadError):
            await storage.upload_bytes('general/a.png', b'data')

    @pytest.mark.asyncio
    async def test_presign_maps_operation_to_client_method(self, storage: StorageService, s3_client):
        await storage.generate_presigned_url('general/a.png', 'put', 600)

        s3_client.generate_presigned_url.assert_called_once_with(
            'put_object',
            Params={'Bucket': 'test-bucket', 'Key': 'general/a.png'},
            ExpiresIn=600,
        )

    @pytest.mark.asyncio
    async def test_presign_rejects_unknown_operation(self, storage: StorageService):
        with pytest.raises(PresignedUrlError):
            await storage.generate_presigned_url('general/a.png', 'delete')


class TestMediaService:

    @pytest.mark.asyncio
    async def test_upload_records_media(self, db_session, storage: StorageService, s3_client):
        service = MediaService(db_session, storage)
        metadata = MediaUploadMetadata(folder=MediaFolder.SLIDERS, title='Banner', tags=['home', 'hero'])

        media = await service.upload_media(_png(), metadata, user_id=None)

        assert media.id
        assert media.file_name.startswith('sliders/')
        assert media.category == MediaCategory.IMAGE
        assert media.size == 1024
        assert media.original_name == 'Office Photo (1).png'
        assert media.url.endswith(media.file_name)
        assert media.tags == ['home', 'hero']
        sent_metadata = s3_client.put_object.call_args.kwargs['Metadata']
        assert sent_metadata['tags'] == 'home-hero'
        assert sent_metadata['is_public'] == 'true'

    @pytest.mark.asyncio
    async def test_invalid_upload_never_reaches_storage(self, db_session, storage: StorageService, s3_client):
        service = MediaService(db_session, storage)
        file = UploadedFile(filename='clip.mp4', content_type='video/mp4', content=b'x')

        with pytest.raises(MediaValidationError) as exc_info:
            await service.upload_media(file, MediaUploadMetadata(folder=MediaFolder.LOGOS), user_id=None)

        assert exc_info.value.details['errors'][0]['code'] == 'INCOMPATIBLE_FOLDER'
        s3_client.put_object.assert_not_called()

    @pytest.mark.asyncio
    async def test_commit_failure_removes_uploaded_object(self, storage: StorageService, s3_client):
        db = MagicMock()
        db.commit = AsyncMock(side_effect=RuntimeError('db down'))
        db.rollback = AsyncMock()
        service = MediaService(db, storage)

        with pytest.raises(RuntimeError, match='db down'):
            await service.upload_media(_png(), MediaUploadMetadata(), user_id=None)

        db.rollback.assert_awaited_once()
        key = s3_client.put_object.call_args.kwargs['Key']
        s3_client.delete_object.assert_called_once_with(Bucket='test-bucket', Key=key)

    @pytest.mark.asyncio
    async def test_presigned_url_for_existing_media(self, db_session, storage: StorageService, s3_client):
        service = MediaService(db_session, storage)
        media = await service.upload_media(_png(), MediaUploadMetadata(), user_id=None)

        url = await service.generate_presigned_url(media.id, 'get', 300)

        assert url == 'https://signed.example/object?sig=1'
        assert s3_client.generate_presigned_url.call_args.kwargs['ExpiresIn'] == 300

    @pytest.mark.asyncio
    async def test_unknown_media_raises(self, db_session, storage: StorageService):
        service = MediaService(db_session, storage)

        with pytest.raises(MediaNotFoundError):
            await service.get_media('00000000-0000-0000-0000-000000000000')
