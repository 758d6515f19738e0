"""Shared hypothesis strategies for Tessera property-based testing.

- **Class names**: CamelCase component class names
- **Slot names**: snake_case slot names
- **Variants**: variant names as they appear in template file names
"""

from __future__ import annotations

from hypothesis import strategies as st

# A capitalized word: "Card", "Button"
_word = st.from_regex(r"[A-Z][a-z]{1,8}", fullmatch=True)

# CamelCase class names made of 1-4 words: "CardHeader"
class_names = st.lists(_word, min_size=1, max_size=4).map("".join)

# Component class names: "CardHeaderComponent"
component_class_names = class_names.map(lambda name: f"{name}Component")

# snake_case slot names: "tab", "nav_item"
slot_names = st.from_regex(r"[a-z]{2,8}(_[a-z]{2,8}){0,2}", fullmatch=True).filter(
    lambda name: name != "content"
)

# Variant names: "phone", "mini-phone", "tablet_v2"
variant_names = st.from_regex(r"[a-z][a-z0-9]{0,8}([-_][a-z0-9]{1,6})?", fullmatch=True)
