"""Tests for the request-level completion service."""

import pytest

from jython_complete.completion import (
    CompletionService,
    NameCompletion,
    filter_completions,
    sort_completions,
)
from jython_complete.parsing.type_inference import CompletionEntry, Static

from conftest import dedent


@pytest.fixture
def service(engine) -> CompletionService:
    return CompletionService(engine)


IMAGE_SCRIPT = dedent("""
    from ij import IJ
    from demo import Box

    class Volume(object):
        def __init__(self, width, height):
            self.width = width

        def grow(self):
            self.depth = 1

    imp = IJ.getImage()
    box = Box()
    count = 3
    ratio = 0.5

    def process(stack):
        local = 1
""")


class TestSortCompletions:
    """Tests for completion ordering and filtering."""

    def test_prefix_matches_first_then_alphabetical(self):
        entries = [CompletionEntry(n) for n in ["setTitle", "toString", "getTitle", "target"]]

        ordered = [e.name for e in sort_completions(entries, "t")]

        assert ordered == ["target", "toString", "getTitle", "setTitle"]

    def test_empty_seed_is_alphabetical(self):
        entries = [CompletionEntry(n) for n in ["b", "C", "a"]]

        assert [e.name for e in sort_completions(entries, "")] == ["a", "b", "C"]

    def test_filter_is_case_insensitive_substring(self):
        entries = [CompletionEntry(n) for n in ["getTitle", "setTitle", "show"]]

        assert [e.name for e in filter_completions(entries, "TIT")] == ["getTitle", "setTitle"]


class TestMemberCompletion:
    """Tests for member completion through the synthetic capture."""

    def test_members_of_host_expression(self, service):
        entries = service.complete_members(IMAGE_SCRIPT, "imp.getStack()")

        assert [e.name for e in entries] == ["getProcessor", "getSize"]
        assert entries[0].parameters == ("int",)

    def test_seed_filters_and_orders(self, service):
        entries = service.complete_members(IMAGE_SCRIPT, "imp", seed="t")

        names = [e.name for e in entries]
        assert names == ["toString", "getStack", "getTitle", "setTitle"]

    def test_members_of_script_class_instance(self, service):
        entries = service.complete_members(IMAGE_SCRIPT, "Volume(1, 2)")

        assert {"grow", "width", "depth", "__init__"} <= {e.name for e in entries}

    def test_static_members(self, service):
        entries = service.complete_members(IMAGE_SCRIPT, "IJ")

        assert [e.name for e in entries] == ["getImage", "log"]
        assert all(e.is_static for e in entries)

    def test_expression_inside_function(self, service):
        entries = service.complete_members(IMAGE_SCRIPT, "imp", seed="show", indent="    ")

        assert [e.name for e in entries] == ["show"]

    def test_unknown_expression_has_no_members(self, service):
        assert service.complete_members(IMAGE_SCRIPT, "nothing.here()") == []

    def test_broken_source_has_no_members(self, service):
        assert service.complete_members("def f(:\n", "imp") == []

    def test_members_of_assigned_name(self, service):
        entries = service.complete_assigned_members(IMAGE_SCRIPT, "box")

        assert [e.name for e in entries] == ["getSize", "width"]

    def test_capture_does_not_leak_into_source_scope(self, service):
        root = service.engine.build_scope_from_source(IMAGE_SCRIPT)

        assert service.capture_name not in root.get_vars()


class TestNameCompletion:
    """Tests for name completion."""

    def test_names_with_types_and_constructor(self, service):
        completions = service.complete_names(IMAGE_SCRIPT, "Vo")

        assert completions == [NameCompletion("Volume", "Volume", ("width", "height"))]

    def test_names_from_enclosing_scopes(self, service):
        names = [c.name for c in service.complete_names(IMAGE_SCRIPT, "")]

        assert "local" in names
        assert "stack" in names
        assert "imp" in names
        assert "str" in names

    def test_imported_names(self, service):
        completions = service.complete_names(IMAGE_SCRIPT, "I")

        assert NameCompletion("IJ", "ij.IJ", None) in completions


class TestParameterChoices:
    """Tests for parameter-value completion."""

    def test_numeric_parameter(self, service):
        assert service.parameter_choices(IMAGE_SCRIPT, "double") == ["local", "count", "ratio"]

    def test_primitive_is_boxed(self, service):
        assert service.parameter_choices(IMAGE_SCRIPT, "int") == ["ratio"]

    def test_object_parameter(self, service):
        assert service.parameter_choices(IMAGE_SCRIPT, "ij.ImagePlus") == ["imp"]

    def test_capture_is_never_offered(self, service):
        source = IMAGE_SCRIPT + f"{service.capture_name} = 1\n"

        assert service.capture_name not in service.parameter_choices(source, "long")

    def test_static_descriptor_not_offered(self, service):
        scope = service.last_scope(IMAGE_SCRIPT)

        assert scope.find("IJ") == Static("ij.IJ")
        assert "IJ" not in service.parameter_choices(IMAGE_SCRIPT, "ij.IJ")
