import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError as PydanticValidationError

from dynamo_mapper.config import DynamoDBConfig


class TestDynamoDBConfig:
    """Test cases for DynamoDBConfig."""

    def test_default_config(self):
        """Test default configuration values."""
        with patch.dict(os.environ, {"AWS_REGION": "us-west-2"}):
            config = DynamoDBConfig()

            assert config.region_name == "us-west-2"
            assert config.max_pool_connections == 50
            assert config.retries == 3
            assert config.timeout_seconds == 30.0

    def test_table_wait_defaults(self):
        """Test table polling defaults."""
        with patch.dict(os.environ, {}, clear=True):
            config = DynamoDBConfig()

            assert config.region_name == "us-east-1"
            assert config.table_wait_seconds == 3
            assert config.table_wait_attempts == 20
            assert config.enable_debug_logging is False

    def test_config_from_env_vars(self):
        """Test configuration from environment variables."""
        env_vars = {
            "AWS_ACCESS_KEY_ID": "test_key",
            "AWS_SECRET_ACCESS_KEY": "test_secret",
            "AWS_REGION": "eu-west-1",
            "DYNAMODB_ENDPOINT_URL": "http://localhost:8000",
            "DYNAMODB_TABLE_WAIT_SECONDS": "0.5",
            "DYNAMODB_TABLE_WAIT_ATTEMPTS": "5",
            "DYNAMODB_DEBUG_LOGGING": "true"
        }

        with patch.dict(os.environ, env_vars):
            config = DynamoDBConfig.from_env()

            assert config.aws_access_key_id == "test_key"
            assert config.aws_secret_access_key == "test_secret"
            assert config.region_name == "eu-west-1"
            assert config.endpoint_url == "http://localhost:8000"
            assert config.table_wait_seconds == 0.5
            assert config.table_wait_attempts == 5
            assert config.enable_debug_logging is True

    def test_local_development_config(self):
        """Test local development configuration."""
        config = DynamoDBConfig.for_local_development()

        assert config.aws_access_key_id == "local"
        assert config.aws_secret_access_key == "local"
        assert config.endpoint_url == "http://localhost:8000"
        assert config.enable_debug_logging is True

    def test_empty_region(self):
        """Test that a region is required."""
        with pytest.raises(PydanticValidationError, match="AWS region name is required"):
            DynamoDBConfig(region_name="")

    def test_negative_wait_seconds(self):
        """Test that the polling interval cannot be negative."""
        with pytest.raises(PydanticValidationError, match="cannot be negative"):
            DynamoDBConfig(table_wait_seconds=-1)

    def test_wait_attempts_on_assignment(self):
        """Test that assignments are validated."""
        config = DynamoDBConfig()

        with pytest.raises(PydanticValidationError, match="at least 1"):
            config.table_wait_attempts = 0
