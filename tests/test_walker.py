"""Tests for the statement walker and the scope-building driver."""

import pytest

from jython_complete.core.types import FLOATING_TYPE, INTEGRAL_TYPE, PLACEHOLDER_CLASS, STRING_TYPE
from jython_complete.parsing.type_inference import (
    UNKNOWN,
    ClassType,
    Function,
    Instance,
    Scope,
    Static,
    TypeInferenceEngine,
)


class TestImports:
    """Tests for import statements."""

    def test_plain_import_binds_first_component(self, build):
        scope = build("""
            import os.path
            import sys
        """)

        assert scope.imports["os"] == Static("os")
        assert scope.imports["sys"] == Static("sys")
        assert "os.path" not in scope.imports

    def test_aliased_import(self, build):
        scope = build("import java.util as ju\n")

        assert scope.imports == {"ju": Static("java.util")}

    def test_from_import(self, build):
        scope = build("from ij import IJ, ImagePlus as IP\n")

        assert scope.imports["IJ"] == Static("ij.IJ")
        assert scope.imports["IP"] == Static("ij.ImagePlus")
        assert "ImagePlus" not in scope.imports

    def test_wildcard_import_uses_module_index(self, build):
        scope = build("from mylib import *\n")

        assert scope.imports == {
            "helper": Static("mylib.helper"),
            "Thing": Static("mylib.Thing"),
        }

    def test_wildcard_import_of_unknown_module_binds_nothing(self, build):
        scope = build("from nowhere import *\n")

        assert scope.imports == {}


class TestAssignments:
    """Tests for assignment shapes."""

    def test_reassignment_replaces(self, build):
        scope = build("""
            x = 1
            x = "now a string"
        """)

        assert scope.vars["x"] == Instance(STRING_TYPE)

    def test_tuple_destructuring(self, build):
        scope = build("a, b = 1, 2.0\n")

        assert scope.vars["a"] == Instance(INTEGRAL_TYPE)
        assert scope.vars["b"] == Instance(FLOATING_TYPE)

    def test_bracketed_destructuring(self, build):
        scope = build("""
            (a, b) = ("s", 1)
            [c, d] = [1.0, "t"]
        """)

        assert scope.vars["a"] == Instance(STRING_TYPE)
        assert scope.vars["b"] == Instance(INTEGRAL_TYPE)
        assert scope.vars["c"] == Instance(FLOATING_TYPE)
        assert scope.vars["d"] == Instance(STRING_TYPE)

    def test_swap_evaluates_right_side_first(self, build):
        scope = build("""
            a, b = 1, "s"
            a, b = b, a
        """)

        assert scope.vars["a"] == Instance(STRING_TYPE)
        assert scope.vars["b"] == Instance(INTEGRAL_TYPE)

    def test_star_unpacking_is_skipped(self, build):
        scope = build("first, *rest = 1, 2, 3\n")

        assert "first" not in scope.vars
        assert "rest" not in scope.vars

    def test_non_literal_destructuring_is_skipped(self, build):
        scope = build("""
            pair = None
            a, b = pair
        """)

        assert "a" not in scope.vars
        assert "b" not in scope.vars

    def test_chained_assignment_shares_descriptor(self, build):
        scope = build("a = b = 1.0\n")

        assert scope.vars["a"] == Instance(FLOATING_TYPE)
        assert scope.vars["a"] is scope.vars["b"]

    def test_dotted_target_on_non_class_is_ignored(self, build):
        scope = build("""
            n = 1
            n.attr = 2
            missing.attr = 3
        """)

        assert scope.vars == {"n": Instance(INTEGRAL_TYPE)}

    def test_dotted_target_registers_class_member(self, build):
        scope = build("""
            class Config:
                pass
            Config.debug = True
        """)

        assert "debug" in scope.vars["Config"].member_names

    def test_dotted_target_follows_nested_classes(self, build):
        scope = build("""
            class Outer:
                class Inner:
                    pass
            Outer.Inner.size = 1
        """)

        outer = scope.vars["Outer"]
        assert outer.member_names == ["Inner"]
        assert outer.scope.vars["Inner"].member_names == ["size"]

    def test_dotted_target_does_not_reach_outer_bindings(self, build):
        scope = build("""
            class Foo:
                pass
            class Bar:
                pass
            x = Foo()
            y = Bar()
            x.y.z = 1
        """)

        assert scope.vars["Foo"].member_names == ["y"]
        assert scope.vars["Bar"].member_names == []

    def test_dotted_target_on_receiver_leaves_parameters_alone(self, build):
        scope = build("""
            class Foo:
                def m(self, a):
                    self.a.b = 1
        """)

        foo = scope.vars["Foo"]
        method = foo.scope.vars["m"]
        assert method.scope.vars["a"].member_names == []
        assert "a" in foo.member_names
        assert "b" not in foo.member_names


class TestFunctions:
    """Tests for function definitions."""

    def test_parameters_are_placeholders(self, build):
        scope = build("""
            def f(a, b=2, *args, **kwargs):
                pass
        """)

        fn = scope.vars["f"]
        assert isinstance(fn, Function)
        assert fn.param_names == ["a", "b", "args", "kwargs"]
        for name in fn.param_names:
            placeholder = fn.scope.vars[name]
            assert isinstance(placeholder, ClassType)
            assert placeholder.name == PLACEHOLDER_CLASS
            assert placeholder.scope is fn.scope
        assert fn.scope.parent is scope

    def test_each_parameter_gets_its_own_placeholder(self, build):
        scope = build("""
            def f(a, b):
                pass
        """)

        fn = scope.vars["f"]
        assert fn.scope.vars["a"] is not fn.scope.vars["b"]

    def test_typed_parameters(self, build):
        scope = build("""
            def f(a: int, b: str = "x", *, c=1):
                pass
        """)

        assert scope.vars["f"].param_names == ["a", "b", "c"]

    def test_return_type_from_last_statement(self, build):
        scope = build("""
            def f():
                x = "s"
                return x
        """)

        assert scope.vars["f"].return_type_name == STRING_TYPE

    def test_return_not_last_gives_no_type(self, build):
        scope = build("""
            def f(flag):
                if flag:
                    return 1
                log = 2
        """)

        assert scope.vars["f"].return_type_name is None

    def test_returning_a_parameter_gives_no_type(self, build):
        scope = build("""
            def identity(value):
                return value
        """)

        assert scope.vars["identity"].return_type_name is None

    def test_decorated_function(self, build):
        scope = build("""
            @decorator
            def f():
                return 1
        """)

        assert scope.vars["f"].return_type_name == INTEGRAL_TYPE

    def test_function_body_sees_enclosing_names(self, build):
        scope = build("""
            from ij import IJ
            def f():
                imp = IJ.getImage()
        """)

        assert scope.vars["f"].scope.vars["imp"] == Instance("ij.ImagePlus")


class TestControlBlocks:
    """Tests for control-flow statements walked into the same scope."""

    def test_blocks_bind_in_enclosing_scope(self, build):
        scope = build("""
            if ready:
                a = 1
            elif other:
                b = 2.0
            else:
                c = "s"
            while running:
                d = 1
            else:
                e = 1
            try:
                f = 1
            except Exception as error:
                g = 1
            else:
                h = 1
            finally:
                i = 1
            with open(path) as fh:
                j = 1
        """)

        for name in "abcdefghij":
            assert name in scope.vars, name
        assert scope.children == []

    def test_for_loop_binds_targets_and_body(self, build):
        scope = build("""
            for index, item in pairs:
                total = 1.0
            else:
                done = 1
        """)

        assert scope.vars["index"] is UNKNOWN
        assert scope.vars["item"] is UNKNOWN
        assert scope.vars["total"] == Instance(FLOATING_TYPE)
        assert scope.vars["done"] == Instance(INTEGRAL_TYPE)

    def test_function_inside_block_gets_child_scope(self, build):
        scope = build("""
            if True:
                def inner():
                    pass
        """)

        assert isinstance(scope.vars["inner"], Function)
        assert len(scope.children) == 1


class TestScopeBuilding:
    """Tests for the driver."""

    def test_idempotent(self, build):
        source = """
            from ij import IJ
            class Volume(object):
                def __init__(self, w):
                    self.w = w
            v = Volume(3)
            imp = IJ.getImage()
            a, b = 1, 2.0
        """

        assert build(source).dump() == build(source).dump()

    def test_parse_failure_gives_empty_scope(self, build):
        scope = build("""
            x = 1
            def broken(:
        """)

        assert isinstance(scope, Scope)
        assert scope.is_empty()
        assert scope.parent is None

    def test_empty_source(self, build):
        assert build("").is_empty()

    def test_tolerant_parsing_still_returns_a_scope(self, context):
        engine = TypeInferenceEngine(context=context, tolerate_syntax_errors=True)

        scope = engine.build_scope_from_source("x = 1\ny = (\n")

        assert isinstance(scope, Scope)

    def test_get_last_is_innermost_trailing_scope(self, build):
        scope = build("""
            def outer():
                def inner():
                    z = 1
        """)

        last = scope.get_last()
        assert "z" in last.vars
        assert last.parent.parent is scope

    @pytest.mark.parametrize("statement", ["print('x')", "x += 1", "del y", "pass", "assert z"])
    def test_other_statements_are_ignored(self, build, statement):
        scope = build(statement + "\n")

        assert scope.vars == {}
        assert scope.imports == {}

