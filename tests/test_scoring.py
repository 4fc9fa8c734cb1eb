"""Tests for classification and scoring."""

import pytest

from depbridge.models import DependencyImportance, DependencyType
from depbridge.scoring import (
    TYPE_WEIGHTS,
    classify,
    corpus_importance,
    file_role,
    importance_score,
    is_bidirectional,
    score,
)


class TestClassify:
    """Tests for dependency kind classification."""

    @pytest.mark.parametrize(
        "path,symbols,expected",
        [
            ("src/styles/app.css", ["Foo"], DependencyType.STYLE),
            ("src/theme.scss", [], DependencyType.STYLE),
            ("public/logo.svg", [], DependencyType.ASSET),
            ("src/data.json", ["Config"], DependencyType.CONFIG),
            ("settings.yml", [], DependencyType.CONFIG),
            ("src/app/api/users/route.ts", ["GET"], DependencyType.API),
            ("src/components/foo.tsx", ["Foo"], DependencyType.COMPONENT),
            ("src/types/user.ts", ["UserType"], DependencyType.TYPE),
            ("src/types/user.ts", ["PropsInterface"], DependencyType.TYPE),
            ("src/types/user.ts", ["type User"], DependencyType.TYPE),
            ("src/lib/format.ts", ["helper"], DependencyType.IMPORT),
            ("src/lib/format.ts", [], DependencyType.IMPORT),
            ("zod", ["z"], DependencyType.IMPORT),
        ],
    )
    def test_rules(self, path, symbols, expected):
        """Test each classification rule."""
        assert classify(path, symbols) is expected

    def test_component_beats_type(self):
        """Test rule order when symbols match several rules."""
        assert classify("src/x.ts", ["type Bar", "Foo"]) is DependencyType.COMPONENT

    def test_api_file_name_is_not_a_directory(self):
        """Test only directory segments named api count."""
        assert classify("src/lib/api.ts", ["fetchUser"]) is DependencyType.IMPORT


class TestScore:
    """Tests for the four-tier importance buckets."""

    @pytest.mark.parametrize(
        "dep_type,count,bidirectional,expected",
        [
            (DependencyType.IMPORT, 1, False, DependencyImportance.MEDIUM),
            (DependencyType.IMPORT, 1, True, DependencyImportance.HIGH),
            (DependencyType.COMPONENT, 5, True, DependencyImportance.CRITICAL),
            (DependencyType.COMPONENT, 5, False, DependencyImportance.CRITICAL),
            (DependencyType.COMPONENT, 3, False, DependencyImportance.HIGH),
            (DependencyType.TYPE, 3, False, DependencyImportance.MEDIUM),
            (DependencyType.STYLE, 1, False, DependencyImportance.LOW),
            (DependencyType.STYLE, 2, True, DependencyImportance.MEDIUM),
            (DependencyType.UNKNOWN, 5, False, DependencyImportance.MEDIUM),
        ],
    )
    def test_buckets(self, dep_type, count, bidirectional, expected):
        """Test representative scores."""
        assert score(dep_type, count, bidirectional) is expected

    def test_raw_score(self):
        """Test the additive parts."""
        assert importance_score(DependencyType.COMPONENT, 5, True) == 9
        assert importance_score(DependencyType.TYPE, 2, False) == 3

    @pytest.mark.parametrize("dep_type", list(DependencyType))
    @pytest.mark.parametrize("bidirectional", [False, True])
    def test_more_references_never_lower_importance(self, dep_type, bidirectional):
        """Test importance is monotone in the reference count."""
        ranks = [score(dep_type, count, bidirectional).rank for count in range(1, 6)]

        assert ranks == sorted(ranks, reverse=True)

    def test_every_type_has_a_weight(self):
        """Test the weight table covers every dependency type."""
        assert set(TYPE_WEIGHTS) == set(DependencyType)


class TestCorpusImportance:
    """Tests for the repository-wide file importance."""

    def test_formula(self):
        """Test importers, exports and path bonus add up."""
        assert corpus_importance("src/lib/a.ts", 3, 2) == 31
        assert corpus_importance("src/components/x.tsx", 0, 1) == 13
        assert corpus_importance("src/types/t.ts", 1, 0) == 6
        assert corpus_importance("a.ts", 0, 0) == 0

    def test_utils_bonus(self):
        """Test utils directories get the library bonus."""
        assert corpus_importance("src/utils/date.ts", 0, 0) == 5


class TestHelpers:
    """Tests for small scoring helpers."""

    def test_is_bidirectional(self):
        """Test back-edges and self references."""
        assert is_bidirectional("a.ts", "b.ts", ["a.ts"])
        assert not is_bidirectional("a.ts", "b.ts", [])
        assert not is_bidirectional("a.ts", "a.ts", ["a.ts"])

    @pytest.mark.parametrize(
        "path,role",
        [
            ("src/components/Button.tsx", "component"),
            ("src/lib/format.ts", "utility"),
            ("src/types/post.ts", "type"),
            ("src/app/page.tsx", "page"),
            ("next.config.js", "config"),
            ("src/app/globals.css", "style"),
            ("src/index.ts", "file"),
        ],
    )
    def test_file_role(self, path, role):
        """Test coarse file roles."""
        assert file_role(path) == role
