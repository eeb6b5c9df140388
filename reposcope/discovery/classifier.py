"""Repository category detection.

Categories are assigned from an ordered rule table. More specific rules
come first; the first rule that matches wins.
"""

from __future__ import annotations

import asyncio
import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Awaitable, Callable, List, Optional, Sequence

import aiofiles

from reposcope.registry.types import UNKNOWN_CATEGORY

logger = logging.getLogger(__name__)

BACKEND_JS_FRAMEWORKS = (
    "express", "fastify", "koa", "nestjs", "next", "nuxt",
    "hapi", "restify", "sails", "loopback", "feathers",
)

FRONTEND_JS_FRAMEWORKS = (
    "react", "vue", "angular", "svelte", "preact",
    "next", "nuxt", "gatsby", "remix", "sveltekit",
)

BACKEND_PY_FRAMEWORKS = (
    "django", "flask", "fastapi", "starlette", "aiohttp", "tornado", "sanic",
)

ContentPredicate = Callable[[Path], Awaitable[bool]]


async def _read_text(path: Path) -> str:
    async with aiofiles.open(path, "r", encoding="utf-8") as f:
        return await f.read()


async def _package_dependencies(path: Path) -> set:
    """Names in dependencies and devDependencies of a package.json."""
    pkg = json.loads(await _read_text(path))
    deps = set()
    if not isinstance(pkg, dict):
        return deps
    for key in ("dependencies", "devDependencies"):
        section = pkg.get(key) or {}
        if isinstance(section, dict):
            deps.update(section)
    return deps


def package_json_uses(frameworks: Sequence[str]) -> ContentPredicate:
    """Predicate: package.json depends on one of ``frameworks``."""

    async def predicate(path: Path) -> bool:
        deps = await _package_dependencies(path)
        return any(framework in deps for framework in frameworks)

    return predicate


def python_manifest_uses(frameworks: Sequence[str]) -> ContentPredicate:
    """Predicate: pyproject.toml / requirements.txt names one of ``frameworks``."""
    pattern = re.compile(
        r"(?im)^[\s\"']*(" + "|".join(re.escape(f) for f in frameworks) + r")\b"
    )

    async def predicate(path: Path) -> bool:
        return pattern.search(await _read_text(path)) is not None

    return predicate


@dataclass(frozen=True)
class ClassificationRule:
    """One row of the classification table.

    ``patterns`` are file names relative to the repository root. A trailing
    ``/`` matches a directory, ``*`` is a glob.
    """

    category: str
    patterns: tuple
    predicate: Optional[ContentPredicate] = None


CLASSIFICATION_RULES: List[ClassificationRule] = [
    ClassificationRule("contracts", ("foundry.toml", "hardhat.config.*", "truffle-config.*")),
    ClassificationRule("backend", ("package.json",), package_json_uses(BACKEND_JS_FRAMEWORKS)),
    ClassificationRule("frontend", ("package.json",), package_json_uses(FRONTEND_JS_FRAMEWORKS)),
    ClassificationRule(
        "backend", ("pyproject.toml", "requirements.txt"), python_manifest_uses(BACKEND_PY_FRAMEWORKS)
    ),
    ClassificationRule("infrastructure", ("terraform/", "cdk.json", "serverless.yml")),
]


def _find_matches(repo_path: Path, pattern: str) -> List[Path]:
    if pattern.endswith("/"):
        candidate = repo_path / pattern.rstrip("/")
        return [candidate] if candidate.is_dir() else []
    if "*" in pattern:
        return sorted(p for p in repo_path.glob(pattern) if p.exists())
    candidate = repo_path / pattern
    return [candidate] if candidate.exists() else []


class RepoClassifier:
    """Assigns a category to a repository directory."""

    def __init__(self, rules: Optional[List[ClassificationRule]] = None):
        self._rules = rules if rules is not None else CLASSIFICATION_RULES

    async def classify(self, repo_path: Path) -> str:
        """Return the category of the first matching rule, or ``unknown``."""
        for rule in self._rules:
            for pattern in rule.patterns:
                matches = await asyncio.to_thread(_find_matches, Path(repo_path), pattern)
                for match in matches:
                    if rule.predicate is None:
                        return rule.category
                    if await self._check_content(rule, match):
                        return rule.category
        return UNKNOWN_CATEGORY

    async def _check_content(self, rule: ClassificationRule, path: Path) -> bool:
        # A manifest that can't be read or parsed simply doesn't match
        try:
            return await rule.predicate(path)
        except (OSError, ValueError, UnicodeDecodeError) as e:
            logger.debug("Skipping %s for %s rule: %s", path, rule.category, e)
            return False
