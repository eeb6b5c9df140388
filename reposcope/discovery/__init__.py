"""Repository discovery, classification and validation."""

from reposcope.discovery.classifier import CLASSIFICATION_RULES, ClassificationRule, RepoClassifier
from reposcope.discovery.discoverer import REPO_INDICATORS, RepoDiscoverer
from reposcope.discovery.validator import RepoValidator

__all__ = [
    "CLASSIFICATION_RULES",
    "ClassificationRule",
    "REPO_INDICATORS",
    "RepoClassifier",
    "RepoDiscoverer",
    "RepoValidator",
]
