import logging
import os
import time

import boto3
from flask import current_app

logger = logging.getLogger(__name__)


def _now_ms():
    return int(time.time() * 1000)


def _original_name(file):
    # Keep the client's name, minus any directory part and leading dots
    name = file.filename.replace("\\", "/").rsplit("/", 1)[-1]
    name = "".join(ch for ch in name if ch.isprintable()).strip().lstrip(".")
    return name or "upload"


def _has_file(file):
    return file is not None and bool(file.filename)


class LocalStorage:
    """Local filesystem storage for product images.

    Files are named ``<unix-ms>-<original name>``. The file is created
    exclusively, so an existing name bumps the timestamp by one millisecond
    instead of overwriting it.
    """

    def save(self, file):
        if not _has_file(file):
            return None
        upload_folder = current_app.config["UPLOAD_FOLDER"]
        os.makedirs(upload_folder, exist_ok=True)
        original = _original_name(file)
        stamp = _now_ms()
        while True:
            filename = f"{stamp}-{original}"
            filepath = os.path.join(upload_folder, filename)
            try:
                with open(filepath, "xb") as dst:
                    file.save(dst)
            except FileExistsError:
                stamp += 1
                continue
            break
        logger.info("Stored upload %s", filepath)
        return f"/uploads/{filename}"


class S3Storage:
    def __init__(self, bucket):
        self.bucket = bucket
        self.s3 = boto3.client("s3")

    def save(self, file):
        if not _has_file(file):
            return None
        key = f"uploads/{_now_ms()}-{_original_name(file)}"
        self.s3.upload_fileobj(file, self.bucket, key, ExtraArgs={
            "ContentType": file.content_type or "application/octet-stream",
        })
        logger.info("Stored upload s3://%s/%s", self.bucket, key)
        return self.get_url(key)

    def get_url(self, image_path):
        if not image_path:
            return ""
        return f"https://{self.bucket}.s3.amazonaws.com/{image_path}"


def create_storage(config):
    if config.get("USE_OBJECT_STORAGE") and config.get("OBJECT_STORE_LOCATION"):
        return S3Storage(config["OBJECT_STORE_LOCATION"])
    return LocalStorage()
