import logging

import cloudinary
import cloudinary.exceptions
import cloudinary.uploader
from django.conf import settings
from rest_framework.exceptions import ValidationError

logger = logging.getLogger(__name__)


def _configure():
    storage = settings.CLOUDINARY_STORAGE
    cloudinary.config(
        cloud_name=storage['CLOUD_NAME'],
        api_key=storage['API_KEY'],
        api_secret=storage['API_SECRET'],
    )


def upload_file_to_cloudinary(upload, folder=None):
    """
    Upload a banner, logo or track document and return its secure URL.

    Raises ValidationError when Cloudinary rejects the file, so serializers
    can surface it as a normal 400 response.
    """
    _configure()
    options = {'resource_type': 'auto'}
    if folder:
        options['folder'] = folder
    try:
        result = cloudinary.uploader.upload(upload, **options)
    except cloudinary.exceptions.Error as e:
        logger.error(f"Cloudinary upload of '{getattr(upload, 'name', upload)}' failed: {e}")
        raise ValidationError(f"Failed to upload file: {e}")
    return result.get('secure_url')
