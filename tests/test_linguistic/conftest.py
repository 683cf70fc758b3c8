"""Pytest fixtures for linguistic analysis tests.

A blank spaCy pipeline stands in for the trained model so the suite runs
without downloading one. POS ratios and entity counts come out as zero.
"""

import pytest
import spacy

from trustlens.linguistic.classifier import TextAuthenticityClassifier
from trustlens.linguistic.config import LinguisticConfig, TextClassifierConfig
from trustlens.linguistic.features import LinguisticFeatureExtractor


@pytest.fixture(scope="session")
def blank_nlp():
    return spacy.blank("en")


@pytest.fixture
def linguistic_config() -> LinguisticConfig:
    return LinguisticConfig()


@pytest.fixture
def classifier_config() -> TextClassifierConfig:
    return TextClassifierConfig(enabled=True, api_key="hf_test", timeout=1.0)


@pytest.fixture
def extractor(linguistic_config, blank_nlp) -> LinguisticFeatureExtractor:
    return LinguisticFeatureExtractor(linguistic_config, nlp=blank_nlp)


@pytest.fixture
def classifier(extractor, linguistic_config, classifier_config) -> TextAuthenticityClassifier:
    return TextAuthenticityClassifier(
        extractor=extractor,
        config=linguistic_config,
        classifier_config=classifier_config,
    )
