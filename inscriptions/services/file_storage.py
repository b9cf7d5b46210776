"""Where uploaded attachments and generated PDFs end up.

Two interchangeable backends: a local directory served by the app, or an S3
bucket. Both return an opaque reference string (URL path or remote URL) that
is stored on the Registration.
"""
import os
import uuid

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from flask import current_app
from werkzeug.utils import secure_filename

from inscriptions.services.errors import (
    FileTooLarge,
    InvalidAttachment,
    PersistenceFailure,
)

ALLOWED_EXTENSIONS = {'.pdf', '.jpg', '.jpeg', '.png'}
ALLOWED_MIMETYPES = {'application/pdf', 'image/jpeg', 'image/jpg', 'image/png'}
DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024


def _checked_extension(file_storage):
    filename = secure_filename(file_storage.filename or '')
    ext = os.path.splitext(filename)[1].lower()
    if ext not in ALLOWED_EXTENSIONS or file_storage.mimetype not in ALLOWED_MIMETYPES:
        raise InvalidAttachment(file_storage.filename or '?')
    return ext


def _read_upload(file_storage, max_size):
    """Extension-checked bytes of an upload, at most ``max_size`` long."""
    ext = _checked_extension(file_storage)
    data = file_storage.read(max_size + 1)
    if len(data) > max_size:
        raise FileTooLarge(file_storage.filename, max_size)
    return ext, data


class LocalFileStorage:
    def __init__(self, root, url_prefix, max_file_size=DEFAULT_MAX_FILE_SIZE):
        self.root = root
        self.url_prefix = url_prefix.rstrip('/')
        self.max_file_size = max_file_size

    def save(self, data, filename, content_type='application/pdf'):
        try:
            os.makedirs(self.root, exist_ok=True)
            with open(os.path.join(self.root, filename), 'wb') as fh:
                fh.write(data)
        except OSError as e:
            raise PersistenceFailure(f"Écriture de {filename} impossible : {e}") from e
        return f'{self.url_prefix}/{filename}'

    def store_upload(self, file_storage):
        ext, data = _read_upload(file_storage, self.max_file_size)
        return self.save(data, f'{uuid.uuid4()}{ext}', file_storage.mimetype)

    def path_for(self, reference):
        name = reference.rsplit('/', 1)[-1]
        return os.path.join(self.root, name)

    def delete(self, reference):
        try:
            os.remove(self.path_for(reference))
        except FileNotFoundError:
            pass


class S3FileStorage:
    def __init__(self, bucket, prefix='', client=None, public_base_url=None,
                 max_file_size=DEFAULT_MAX_FILE_SIZE):
        self.bucket = bucket
        self.prefix = prefix
        self.max_file_size = max_file_size
        self.s3 = client or boto3.client('s3')
        self.public_base_url = (
            public_base_url or f'https://{bucket}.s3.amazonaws.com').rstrip('/')

    def _key(self, filename):
        return f'{self.prefix}{filename}'

    def save(self, data, filename, content_type='application/pdf'):
        key = self._key(filename)
        try:
            self.s3.put_object(Bucket=self.bucket, Key=key, Body=data,
                               ContentType=content_type)
        except (BotoCoreError, ClientError) as e:
            raise PersistenceFailure(f"Envoi de {key} impossible : {e}") from e
        return f'{self.public_base_url}/{key}'

    def store_upload(self, file_storage):
        ext, data = _read_upload(file_storage, self.max_file_size)
        return self.save(data, f'{uuid.uuid4()}{ext}', file_storage.mimetype)

    def delete(self, reference):
        key = reference[len(self.public_base_url) + 1:]
        try:
            self.s3.delete_object(Bucket=self.bucket, Key=key)
        except (BotoCoreError, ClientError) as e:
            current_app.logger.warning(
                f"[storage] Could not delete {key} from {self.bucket}: {e}")


def build_storage(config, kind):
    """Storage for ``kind`` ('uploads' or 'pdfs') per STORAGE_BACKEND."""
    max_size = config.get('MAX_FILE_SIZE', DEFAULT_MAX_FILE_SIZE)
    if config.get('STORAGE_BACKEND') == 's3':
        return S3FileStorage(config['S3_BUCKET'],
                             prefix=f"{config.get('S3_PREFIX', '')}{kind}/",
                             public_base_url=config.get('S3_PUBLIC_BASE_URL'),
                             max_file_size=max_size)
    root = config['UPLOAD_DIR'] if kind == 'uploads' else config['PDF_DIR']
    return LocalFileStorage(root, f'/{kind}', max_file_size=max_size)
