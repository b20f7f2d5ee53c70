"""Shared fixtures for the docmark test-suite."""

from __future__ import annotations

import pytest

SAMPLE_MARKUP = """\
= Modules

Modules group +methods+ and *constants*. See
rdoc-ref:@Visibility for details.

== Visibility

Three levels exist:

* public
* protected
  * only within the class
* private

  Private methods have no explicit receiver:

    def helper
      secret
    end

1. first
2. second

[public] callable from anywhere
[private]
  callable without receiver

self:: the current object
super:: the parent implementation

---

=== Notes

  puts "verbatim *not bold*"
"""


@pytest.fixture
def sample_markup() -> str:
    return SAMPLE_MARKUP
