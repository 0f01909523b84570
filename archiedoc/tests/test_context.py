#!/usr/bin/env python3
"""
Tests for building the page template context.
"""

import json

import pytest

from ..config import ArchieSettings
from ..context import build_template_context
from ..errors import ConfigurationError


@pytest.fixture
def project_dir(tmp_path):
    """A generated project with meta, data and pipeline output."""
    (tmp_path / 'src' / 'data').mkdir(parents=True)
    (tmp_path / 'src' / 'templates').mkdir(parents=True)
    (tmp_path / 'meta.json').write_text(json.dumps({'id': 'election-map', 'title': 'Election map'}))
    (tmp_path / 'src' / 'data' / 'data.json').write_text(json.dumps({'states': ['PA', 'OH']}))
    (tmp_path / 'src' / 'templates' / 'data.json').write_text(json.dumps({'headline': 'Results'}))
    return tmp_path


def test_full_context(project_dir, monkeypatch):
    """Test META, DATA, ARCHIE and ENV are all present."""
    monkeypatch.setenv('NODE_ENV', 'production')

    context = build_template_context(project_dir)

    assert context == {
        'META': {'id': 'election-map', 'title': 'Election map'},
        'DATA': {'states': ['PA', 'OH']},
        'ARCHIE': {'headline': 'Results'},
        'ENV': 'production',
    }


def test_without_archie(project_dir, monkeypatch):
    """Test ARCHIE is left out when not requested."""
    monkeypatch.delenv('NODE_ENV', raising=False)

    context = build_template_context(project_dir, include_archie=False)

    assert 'ARCHIE' not in context
    assert context['ENV'] is None


def test_archie_location_from_settings(project_dir):
    """Test the ARCHIE file follows the configured output path."""
    (project_dir / 'src' / 'data' / 'archie.json').write_text(json.dumps({'intro': 'Hi'}))
    settings = ArchieSettings.from_dict(
        {'docId': 'doc', 'serviceAccountFile': 'key.json', 'outputFile': 'src/data/archie.json'}, apply_env=False)

    assert build_template_context(project_dir, settings=settings)['ARCHIE'] == {'intro': 'Hi'}


def test_missing_file(project_dir):
    """Test a missing context file names the path."""
    (project_dir / 'meta.json').unlink()

    with pytest.raises(ConfigurationError, match='meta.json'):
        build_template_context(project_dir)


def test_invalid_json(project_dir):
    """Test broken JSON is a configuration error."""
    (project_dir / 'src' / 'data' / 'data.json').write_text('{"states": [')

    with pytest.raises(ConfigurationError):
        build_template_context(project_dir)
