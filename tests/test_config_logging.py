"""
Test suite for configuration and structured logging
"""

import json
import logging
import pytest

from bank_ledger import config as config_module
from bank_ledger.config import LedgerConfig, get_config, reload_config
from bank_ledger.logging_config import (
    JSONFormatter, TextFormatter, configure_from_settings, get_logger, log_action,
    setup_logging
)


class ListHandler(logging.Handler):
    """Collects records in memory"""
    
    def __init__(self):
        super().__init__()
        self.records = []
    
    def emit(self, record):
        self.records.append(record)


class TestLedgerConfig:
    """Test environment based configuration"""
    
    def test_defaults(self, monkeypatch):
        """Test default values"""
        for name in ("LOG_LEVEL", "AMOUNT_PRECISION", "TRANSACTION_ID_PREFIX", "ALLOW_ACCOUNT_OVERWRITE"):
            monkeypatch.delenv(f"BANK_LEDGER_{name}", raising=False)
        
        settings = LedgerConfig()
        
        assert settings.log_level == "INFO"
        assert settings.log_format == "json"
        assert settings.amount_precision == 2
        assert settings.transaction_id_prefix == "txn-"
        assert settings.allow_account_overwrite is False
    
    def test_environment_override(self, monkeypatch):
        """Test BANK_LEDGER_ prefixed variables"""
        monkeypatch.setenv("BANK_LEDGER_AMOUNT_PRECISION", "3")
        monkeypatch.setenv("BANK_LEDGER_ALLOW_ACCOUNT_OVERWRITE", "true")
        
        settings = LedgerConfig()
        
        assert settings.amount_precision == 3
        assert settings.allow_account_overwrite is True
    
    def test_reload_config(self, monkeypatch):
        """Test that reload replaces the global instance"""
        original = get_config()
        monkeypatch.setenv("BANK_LEDGER_TRANSACTION_ID_PREFIX", "T-")
        try:
            reloaded = reload_config()
            assert reloaded.transaction_id_prefix == "T-"
            assert get_config() is reloaded
        finally:
            config_module.config = original


class TestFormatters:
    """Test log formatters"""
    
    def make_record(self, **fields):
        record = logging.LogRecord("bank_ledger.test", logging.INFO, __file__, 1, "hello %s", ("world",), None)
        for key, value in fields.items():
            setattr(record, key, value)
        return record
    
    def test_json_formatter(self):
        """Test structured output drops empty fields"""
        output = JSONFormatter().format(self.make_record(action="transfer_funds", extra={"amount": "1.00"}))
        data = json.loads(output)
        
        assert data["message"] == "hello world"
        assert data["level"] == "INFO"
        assert data["logger"] == "bank_ledger.test"
        assert data["action"] == "transfer_funds"
        assert data["extra"] == {"amount": "1.00"}
        assert "resource" not in data
    
    def test_text_formatter(self):
        """Test plain output with action suffix"""
        output = TextFormatter().format(self.make_record(action="close_account", resource="account:A"))
        assert "INFO bank_ledger.test: hello world" in output
        assert output.endswith("[close_account account:A]")


class TestSetupLogging:
    """Test logger configuration helpers"""
    
    def teardown_method(self):
        for name in ("test_bank_ledger", "bank_ledger"):
            logger = logging.getLogger(name)
            for handler in logger.handlers[:]:
                logger.removeHandler(handler)
                handler.close()
            logger.propagate = True
            logger.setLevel(logging.NOTSET)
    
    def test_setup_logging_to_file(self, tmp_path):
        """Test JSON lines written to a file"""
        log_file = tmp_path / "ledger.log"
        logger = setup_logging("DEBUG", "test_bank_ledger", log_file=str(log_file))
        
        log_action(logger, "info", "Account created: A", action="create_account", resource="account:A")
        logger.handlers[0].flush()
        
        data = json.loads(log_file.read_text().strip())
        assert data["message"] == "Account created: A"
        assert data["resource"] == "account:A"
        assert logger.propagate is False
    
    def test_setup_logging_replaces_handlers(self):
        """Test repeated setup does not duplicate handlers"""
        setup_logging("INFO", "test_bank_ledger")
        logger = setup_logging("INFO", "test_bank_ledger", log_format="text")
        
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0].formatter, TextFormatter)
    
    def test_invalid_format(self):
        """Test unsupported format"""
        with pytest.raises(ValueError, match="Unsupported log format"):
            setup_logging("INFO", "test_bank_ledger", log_format="xml")
    
    def test_configure_from_settings(self):
        """Test configuring the package logger from settings"""
        logger = configure_from_settings(LedgerConfig(log_level="WARNING", log_format="text"))
        
        assert logger.name == "bank_ledger"
        assert logger.level == logging.WARNING
    
    def test_log_action_respects_level(self):
        """Test that disabled levels are not emitted"""
        logger = get_logger("test_bank_ledger")
        logger.setLevel(logging.WARNING)
        handler = ListHandler()
        logger.addHandler(handler)
        
        log_action(logger, "info", "ignored")
        log_action(logger, "error", "kept", action="transfer_funds")
        
        assert [record.getMessage() for record in handler.records] == ["kept"]
        assert handler.records[0].action == "transfer_funds"
