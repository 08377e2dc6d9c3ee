"""Tests for attribute set resolution."""

import pytest

from ynlgen.generator import AttributeIndex, InconsistentSpecError
from ynlgen.generator.types import Attribute, AttributeSet, Spec


def _spec(*sets):
    return Spec(name="test", attribute_sets=list(sets))


def describe_attribute_index():
    def indexes_sets_by_name(expect, nlctrl):
        index = AttributeIndex(nlctrl)
        expect(index.name_prefix("main")) == "ctrl-attr-"
        expect(index.name_prefix("mcast-group")) == "ctrl-attr-mcast-grp-"

    def later_duplicates_replace_earlier(expect):
        index = AttributeIndex(
            _spec(
                AttributeSet(name="main", name_prefix="first-"),
                AttributeSet(name="main", name_prefix="second-"),
            )
        )
        expect(index.name_prefix("main")) == "second-"

    def unknown_set_has_no_prefix(expect, nlctrl):
        expect(AttributeIndex(nlctrl).name_prefix("missing")) == ""


def describe_resolve():
    def follows_wanted_order(expect, nlctrl):
        attrs = AttributeIndex(nlctrl).resolve("main", ["version", "family-name", "family-id"])
        expect([a.name for a in attrs]) == ["version", "family-name", "family-id"]

    def returns_full_records(expect, nlctrl):
        (attr,) = AttributeIndex(nlctrl).resolve("main", ["family-name"])
        expect(attr.type) == "nul-string"
        expect(attr.len) == "GENL_NAMSIZ - 1"

    def drops_unknown_names(expect, nlctrl):
        attrs = AttributeIndex(nlctrl).resolve("main", ["family-id", "bogus", "op"])
        expect([a.name for a in attrs]) == ["family-id", "op"]

    def returns_nothing_for_empty_list(expect, nlctrl):
        expect(AttributeIndex(nlctrl).resolve("main", [])) == []

    def rejects_empty_set_name(expect, nlctrl):
        with pytest.raises(InconsistentSpecError, match="empty attribute set"):
            AttributeIndex(nlctrl).resolve("", ["family-id"])

    def rejects_list_without_matches(expect, nlctrl):
        with pytest.raises(InconsistentSpecError) as e:
            AttributeIndex(nlctrl).resolve("main", ["bogus", "also-bogus"])
        expect("'main'" in str(e.value)) == True
        expect("['bogus', 'also-bogus']" in str(e.value)) == True

    def rejects_unknown_set(expect):
        index = AttributeIndex(_spec(AttributeSet(name="main", attributes=[Attribute(name="a")])))
        with pytest.raises(InconsistentSpecError, match="missing"):
            index.resolve("missing", ["a"])
