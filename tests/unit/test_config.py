"""Tests for level parsing and configuration translation."""

import logging

import pytest

from minilog import (
    BASELINE_ENGINE_CONFIG,
    InvalidLevelError,
    Level,
    LoggerConfig,
    to_engine_config,
)


class TestLevelParse:

    @pytest.mark.parametrize('text,expected', [
        ('debug', Level.DEBUG),
        ('INFO', Level.INFO),
        ('warn', Level.WARN),
        ('Error', Level.ERROR),
        ('dpanic', Level.DPANIC),
        ('panic', Level.PANIC),
        ('fatal', Level.FATAL),
    ])
    def test_recognized_tokens(self, text, expected):
        assert Level.parse(text) is expected

    def test_empty_string_means_info(self):
        assert Level.parse('') is Level.INFO

    def test_unknown_token_names_the_input(self):
        with pytest.raises(InvalidLevelError) as exc_info:
            Level.parse('notalevel')
        assert 'notalevel' in str(exc_info.value)
        assert exc_info.value.text == 'notalevel'

    @pytest.mark.parametrize('text', ['warning', ' info ', 'info\n'])
    def test_aliases_and_whitespace_are_rejected(self, text):
        with pytest.raises(InvalidLevelError):
            Level.parse(text)

    def test_invalid_level_is_a_value_error(self):
        with pytest.raises(ValueError):
            Level.parse('loud')

    def test_stdlib_levels(self):
        assert Level.DEBUG.stdlib_level == logging.DEBUG
        assert Level.WARN.stdlib_level == logging.WARNING
        assert Level.FATAL.stdlib_level == logging.CRITICAL


class TestToEngineConfig:

    def test_overlays_caller_settings_on_baseline(self):
        conf = LoggerConfig(
            encoding='console',
            output_paths=['stderr', '/tmp/x.log'],
            level='error',
            name='billing',
        )
        cfg = to_engine_config(conf)

        assert cfg.encoding == 'console'
        assert cfg.output_paths == ('stderr', '/tmp/x.log')
        assert cfg.level is Level.ERROR
        assert cfg.name == 'billing'
        # Keys and formats come from the baseline.
        assert cfg.message_key == 'message'
        assert cfg.level_key == 'level'
        assert cfg.time_key == 'time'
        assert cfg.name_key == 'logger'
        assert cfg.caller_key == 'caller'
        assert cfg.stacktrace_key == ''
        assert cfg.time_format == 'iso'
        assert cfg.full_caller is True

    def test_initial_fields_are_copied(self):
        fields = {'service': 'api'}
        cfg = to_engine_config(LoggerConfig(initial_fields=fields))

        fields['service'] = 'changed'
        fields['extra'] = 1

        assert dict(cfg.initial_fields) == {'service': 'api'}

    def test_initial_fields_are_read_only(self):
        cfg = to_engine_config(LoggerConfig(initial_fields={'a': 1}))
        with pytest.raises(TypeError):
            cfg.initial_fields['b'] = 2

    def test_baseline_is_not_mutated(self):
        to_engine_config(LoggerConfig(level='debug', initial_fields={'a': 1}))
        assert BASELINE_ENGINE_CONFIG.level is Level.INFO
        assert dict(BASELINE_ENGINE_CONFIG.initial_fields) == {}
        assert BASELINE_ENGINE_CONFIG.output_paths == ()

    def test_invalid_level_fails(self):
        with pytest.raises(InvalidLevelError, match='notalevel'):
            to_engine_config(LoggerConfig(level='notalevel'))


class TestLoggerConfig:

    def test_defaults(self):
        conf = LoggerConfig()
        assert conf.encoding == 'json'
        assert conf.output_paths == ['stdout']
        assert conf.level == 'info'
        assert conf.initial_fields == {}
        assert conf.validate() == []

    def test_validate_reports_every_problem(self):
        conf = LoggerConfig(encoding='xml', level='loud', output_paths=[''])
        errors = conf.validate()
        assert len(errors) == 3
        assert any('loud' in e for e in errors)
        assert any('xml' in e for e in errors)

    def test_from_env(self):
        conf = LoggerConfig.from_env({
            'LOG_LEVEL': 'DEBUG',
            'LOG_FORMAT': 'Console',
            'LOG_OUTPUT': 'stdout, /var/log/app.log',
            'LOG_NAME': 'worker',
        })
        assert conf.level == 'DEBUG'
        assert conf.encoding == 'console'
        assert conf.output_paths == ['stdout', '/var/log/app.log']
        assert conf.name == 'worker'

    def test_from_env_defaults(self):
        conf = LoggerConfig.from_env({})
        assert conf == LoggerConfig()

    def test_from_env_reads_os_environ(self, monkeypatch):
        monkeypatch.setenv('LOG_LEVEL', 'error')
        monkeypatch.delenv('LOG_OUTPUT', raising=False)
        conf = LoggerConfig.from_env()
        assert conf.level == 'error'
        assert conf.output_paths == ['stdout']
