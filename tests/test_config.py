"""
Tests for configuration loading.
"""

from pathlib import Path

import pytest

from conftest import neutral_field
from receipt_normalizer.config import ConfigError, ConfigLoader, EngineSettings
from receipt_normalizer.parser.field_mapper import CollisionPolicy

SAMPLE_CONFIG = Path(__file__).parent.parent / 'config' / 'engine.yaml'


class TestConfigLoader:

    def test_defaults(self):
        loader = ConfigLoader()
        assert loader.settings == EngineSettings()
        assert loader.settings.review_threshold == 80.0
        assert loader.settings.collision_policy is CollisionPolicy.LAST_WINS

    def test_sample_file(self):
        loader = ConfigLoader(SAMPLE_CONFIG)
        assert loader.settings.high_confidence_threshold == 90.0
        assert loader.settings.summary_aliases['AMOUNT_DUE'] == 'amount'

    def test_yaml_file(self, tmp_path):
        path = tmp_path / 'engine.yaml'
        path.write_text(
            "settings:\n"
            "  review_threshold: 70\n"
            "  collision_policy: highest_confidence\n"
            "  prefer_day_first: true\n"
            "summary_aliases:\n"
            "  GRAND_TOTAL: amount\n",
            encoding='utf-8',
        )

        loader = ConfigLoader(path)

        assert loader.settings.review_threshold == 70.0
        assert loader.settings.collision_policy is CollisionPolicy.HIGHEST_CONFIDENCE
        assert loader.settings.prefer_day_first is True

    def test_build_mapper_uses_settings(self):
        loader = ConfigLoader()
        loader.load_dict({
            'settings': {'prefer_day_first': True},
            'summary_aliases': {'GRAND_TOTAL': 'amount'},
        })
        mapper = loader.build_mapper()

        result = mapper.parse_document({'documents': [{'summaryFields': [
            neutral_field('GRAND_TOTAL', '5,00', 90),
            neutral_field('DATE', '05/06/2025', 90),
        ]}]})
        assert result.fields == {'amount': 5.0, 'date': '2025-06-05'}

    def test_empty_file(self, tmp_path):
        path = tmp_path / 'empty.yaml'
        path.write_text("", encoding='utf-8')
        assert ConfigLoader(path).settings == EngineSettings()

    def test_to_dict(self):
        data = EngineSettings().to_dict()
        assert data['collision_policy'] == 'last_wins'
        assert data['summary_aliases'] == {}


class TestConfigErrors:

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError):
            ConfigLoader(tmp_path / 'missing.yaml')

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / 'bad.yaml'
        path.write_text("settings: [unclosed", encoding='utf-8')
        with pytest.raises(ConfigError):
            ConfigLoader(path)

    def test_unknown_policy(self):
        with pytest.raises(ConfigError):
            ConfigLoader().load_dict({'settings': {'collision_policy': 'first_wins'}})

    def test_non_numeric_threshold(self):
        with pytest.raises(ConfigError):
            ConfigLoader().load_dict({'settings': {'review_threshold': 'high'}})

    def test_thresholds_out_of_order(self):
        with pytest.raises(ConfigError):
            ConfigLoader().load_dict({'settings': {
                'review_threshold': 90, 'high_confidence_threshold': 80,
            }})

    @pytest.mark.parametrize('key', ['prefer_day_first', 'all_documents'])
    @pytest.mark.parametrize('value', ['false', 'yes', 0, 1])
    def test_flag_must_be_boolean(self, key, value):
        with pytest.raises(ConfigError):
            ConfigLoader().load_dict({'settings': {key: value}})

    def test_quoted_flag_in_yaml(self, tmp_path):
        path = tmp_path / 'quoted.yaml'
        path.write_text("settings:\n  prefer_day_first: 'false'\n", encoding='utf-8')
        with pytest.raises(ConfigError):
            ConfigLoader(path)

    def test_root_not_mapping(self):
        with pytest.raises(ConfigError):
            ConfigLoader().load_dict(['settings'])

    def test_unknown_alias_target(self):
        loader = ConfigLoader()
        loader.load_dict({'summary_aliases': {'GRAND_TOTAL': 'grandTotal'}})
        with pytest.raises(ConfigError):
            loader.build_mapper()

    def test_config_error_is_value_error(self):
        assert issubclass(ConfigError, ValueError)
