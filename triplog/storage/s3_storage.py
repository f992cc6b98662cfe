"""
S3 Storage Backend for TripLog.
Stores trip documents as JSON objects under a ``trips/`` prefix.
"""

import json
from datetime import datetime
from typing import Any, Dict, List, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError, NoCredentialsError

from ..config.logging_config import get_logger, log_function_entry, log_function_exit

logger = get_logger(__name__)

TRIP_PREFIX = "trips"


class S3StorageBackend:
    """Amazon S3 storage backend for trip documents."""

    def __init__(self, config, client=None):
        """
        Initialize S3 storage backend.

        Args:
            config: S3Config instance with AWS credentials and settings
            client: Pre-built boto3 S3 client (skips client creation)
        """
        self.config = config
        self.s3_client = client
        if self.s3_client is None:
            self._initialize_client()

    def _initialize_client(self):
        """Initialize S3 client with configured credentials."""
        if not self.config.is_configured():
            logger.warning("S3 not properly configured - missing credentials or bucket")
            return

        try:
            self.s3_client = boto3.client(
                's3',
                aws_access_key_id=self.config.aws_access_key_id,
                aws_secret_access_key=self.config.aws_secret_access_key,
                region_name=self.config.aws_region
            )
            self.s3_client.head_bucket(Bucket=self.config.bucket_name)
            logger.info(f"S3 client initialized successfully for bucket: {self.config.bucket_name}")

        except NoCredentialsError:
            logger.error("AWS credentials not found")
            self.s3_client = None
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to initialize S3 client: {e}")
            self.s3_client = None

    def is_available(self) -> bool:
        """Check if S3 storage is available."""
        return self.s3_client is not None

    def _build_key(self, filename: str) -> str:
        return f"{TRIP_PREFIX}/{filename}"

    def save_document(self, content: str, filename: str) -> bool:
        """
        Upload a serialized trip document.

        Args:
            content: JSON text
            filename: Object name under the trips prefix

        Returns:
            Success status
        """
        log_function_entry(logger, "save_document", filename=filename)

        if not self.is_available():
            logger.error("S3 storage not available")
            return False

        body = content.encode('utf-8')
        size_mb = len(body) / (1024 * 1024)
        if size_mb > self.config.max_file_size_mb:
            logger.error(f"Trip document too large: {size_mb:.2f}MB > {self.config.max_file_size_mb}MB")
            return False

        key = self._build_key(filename)
        try:
            self.s3_client.put_object(
                Bucket=self.config.bucket_name,
                Key=key,
                Body=body,
                ContentType='application/json',
                Metadata={'upload_timestamp': datetime.now().isoformat()}
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to save trip document to S3: {e}")
            return False

        logger.info(f"Saved trip document to S3: {key} ({size_mb:.2f}MB)")
        log_function_exit(logger, "save_document", f"key={key}")
        return True

    def load_document(self, filename: str) -> Optional[str]:
        """Download a trip document's JSON text, or None if it does not exist."""
        log_function_entry(logger, "load_document", filename=filename)

        if not self.is_available():
            logger.error("S3 storage not available")
            return None

        key = self._build_key(filename)
        try:
            response = self.s3_client.get_object(Bucket=self.config.bucket_name, Key=key)
            content = response['Body'].read().decode('utf-8')
        except ClientError as e:
            if e.response.get('Error', {}).get('Code') in ('NoSuchKey', '404'):
                logger.debug(f"Trip document not found in S3: {key}")
            else:
                logger.error(f"Failed to load trip document from S3: {e}")
            return None
        except BotoCoreError as e:
            logger.error(f"Failed to load trip document from S3: {e}")
            return None

        log_function_exit(logger, "load_document", f"key={key}")
        return content

    def list_documents(self) -> List[Dict[str, Any]]:
        """List stored trip documents."""
        if not self.is_available():
            return []

        try:
            response = self.s3_client.list_objects_v2(
                Bucket=self.config.bucket_name,
                Prefix=f"{TRIP_PREFIX}/"
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to list trip documents in S3: {e}")
            return []

        files = []
        for obj in response.get('Contents', []):
            filename = obj['Key'].split('/')[-1]
            if filename:
                files.append({
                    'filename': filename,
                    'size_bytes': obj['Size'],
                    'last_modified': obj['LastModified'].isoformat(),
                    'backend': 's3'
                })
        return files

    def delete_document(self, filename: str) -> bool:
        if not self.is_available():
            return False

        key = self._build_key(filename)
        try:
            self.s3_client.delete_object(Bucket=self.config.bucket_name, Key=key)
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to delete trip document from S3: {e}")
            return False

        logger.info(f"Deleted trip document from S3: {key}")
        return True
