# inscriptions/tests/test_file_storage.py
from io import BytesIO
import pytest
from botocore.exceptions import ClientError
from werkzeug.datastructures import FileStorage
from inscriptions.services.credentials import PasswordHashVerifier
from inscriptions.services.errors import (
    FileTooLarge,
    InvalidAttachment,
    PersistenceFailure,
)
from inscriptions.services.file_storage import (
    LocalFileStorage,
    S3FileStorage,
    build_storage,
)
from werkzeug.security import generate_password_hash


def upload(filename, content_type):
    return FileStorage(stream=BytesIO(b'data'), filename=filename,
                       content_type=content_type)


def test_local_storage_save_and_delete(tmp_path):
    storage = LocalFileStorage(str(tmp_path / 'pdfs'), '/pdfs/')

    reference = storage.save(b'%PDF-1.4', 'abc-auth.pdf')

    assert reference == '/pdfs/abc-auth.pdf'
    assert (tmp_path / 'pdfs' / 'abc-auth.pdf').read_bytes() == b'%PDF-1.4'

    storage.delete(reference)
    assert not (tmp_path / 'pdfs' / 'abc-auth.pdf').exists()
    # Deleting twice is harmless
    storage.delete(reference)


def test_local_storage_renames_uploads(tmp_path):
    storage = LocalFileStorage(str(tmp_path), '/uploads')

    reference = storage.store_upload(upload('../../etc/Carnet.PDF', 'application/pdf'))

    assert reference.startswith('/uploads/')
    assert reference.endswith('.pdf')
    assert 'Carnet' not in reference


@pytest.mark.parametrize('filename,content_type', [
    ('script.exe', 'application/octet-stream'),
    ('image.gif', 'image/gif'),
    ('fake.pdf', 'text/html'),
    ('', 'application/pdf'),
])
def test_rejects_unsupported_uploads(tmp_path, filename, content_type):
    storage = LocalFileStorage(str(tmp_path), '/uploads')
    with pytest.raises(InvalidAttachment):
        storage.store_upload(upload(filename, content_type))


def test_upload_size_limit(tmp_path):
    storage = LocalFileStorage(str(tmp_path), '/uploads', max_file_size=4)

    assert storage.store_upload(upload('ok.pdf', 'application/pdf'))

    big = FileStorage(stream=BytesIO(b'12345'), filename='big.pdf',
                      content_type='application/pdf')
    with pytest.raises(FileTooLarge) as excinfo:
        storage.store_upload(big)
    assert excinfo.value.status_code == 400
    assert excinfo.value.filename == 'big.pdf'
    assert len(list(tmp_path.iterdir())) == 1


def test_local_storage_write_error(tmp_path):
    blocker = tmp_path / 'blocker'
    blocker.write_text('not a directory')
    storage = LocalFileStorage(str(blocker / 'pdfs'), '/pdfs')

    with pytest.raises(PersistenceFailure):
        storage.save(b'%PDF', 'x.pdf')


def test_s3_storage(mocker):
    client = mocker.Mock()
    storage = S3FileStorage('scouts-bucket', prefix='inscriptions/pdfs/',
                            client=client)

    reference = storage.save(b'%PDF', 'abc-auth.pdf')

    assert reference == ('https://scouts-bucket.s3.amazonaws.com/'
                         'inscriptions/pdfs/abc-auth.pdf')
    client.put_object.assert_called_once_with(
        Bucket='scouts-bucket', Key='inscriptions/pdfs/abc-auth.pdf',
        Body=b'%PDF', ContentType='application/pdf')

    storage.delete(reference)
    client.delete_object.assert_called_once_with(
        Bucket='scouts-bucket', Key='inscriptions/pdfs/abc-auth.pdf')


def test_s3_upload_error(mocker):
    client = mocker.Mock()
    client.put_object.side_effect = ClientError(
        {'Error': {'Code': 'AccessDenied', 'Message': 'denied'}}, 'PutObject')
    storage = S3FileStorage('scouts-bucket', client=client,
                            public_base_url='https://cdn.example.fr/')

    with pytest.raises(PersistenceFailure):
        storage.save(b'%PDF', 'abc.pdf')


def test_build_storage(app, mocker):
    local = build_storage(app.config, 'pdfs')
    assert isinstance(local, LocalFileStorage)
    assert local.root == app.config['PDF_DIR']
    assert local.url_prefix == '/pdfs'
    assert local.max_file_size == app.config['MAX_FILE_SIZE']

    boto_client = mocker.patch('inscriptions.services.file_storage.boto3.client')
    config = dict(app.config, STORAGE_BACKEND='s3', S3_BUCKET='scouts-bucket',
                  S3_PREFIX='cluses/', S3_PUBLIC_BASE_URL=None)

    remote = build_storage(config, 'uploads')

    assert isinstance(remote, S3FileStorage)
    assert remote.prefix == 'cluses/uploads/'
    assert remote.s3 is boto_client.return_value


def test_password_hash_verifier():
    verifier = PasswordHashVerifier(generate_password_hash('chef-de-groupe'))
    assert verifier.verify('chef-de-groupe') is True
    assert verifier.verify('autre') is False
    assert verifier.verify('') is False
    assert PasswordHashVerifier(None).verify('chef-de-groupe') is False
