"""Stylesheet generation from design tokens.

The stylesheet is fully determined by TOKENS and the layout grammar, so
the output of ``generate_css`` never changes between calls.
"""

from __future__ import annotations

from .tokens import TOKENS, DeclarationType, GridPattern, tokens_to_css_variables

RESET_CSS = """*,
*::before,
*::after {
  box-sizing: border-box;
  margin: 0;
  padding: 0;
}

html {
  -webkit-text-size-adjust: 100%;
  text-size-adjust: 100%;
}

body {
  min-height: 100vh;
  text-rendering: optimizeLegibility;
  -webkit-font-smoothing: antialiased;
  -moz-osx-font-smoothing: grayscale;
}

ul, ol {
  list-style: none;
}

a {
  color: inherit;
  text-decoration: none;
}"""

BASE_CSS = """body {
  background: var(--base);
  font-family: 'Inter', -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
  color: var(--text-main);
}"""

TYPOGRAPHY_CSS = """.slot--primary {
  font-size: 2.1rem;
  font-weight: 500;
  line-height: 1.25;
  letter-spacing: -0.01em;
}

.slot--secondary {
  font-size: 1.15rem;
  font-weight: 400;
  line-height: 1.6;
  color: var(--text-soft);
}

.slot--meta {
  font-size: 0.95rem;
  line-height: 1.5;
  color: var(--text-muted);
}

.slot--list {
  font-size: 1rem;
  line-height: 1.45;
}

.slot--quote {
  font-size: 1.2rem;
  font-style: italic;
  line-height: 1.5;
}"""

COMPONENTS_CSS = """.slot {
  max-width: var(--line-max);
}

.slot-group {
  display: flex;
  flex-direction: column;
  gap: var(--slot-gap);
}

:focus-visible {
  outline: 3px solid var(--intent);
  outline-offset: 2px;
}

.slot--list ul {
  display: flex;
  flex-direction: column;
  gap: 0.75rem;
}

.slot--list li {
  position: relative;
  padding-left: 1.25rem;
}

.slot--list li::before {
  content: "\\2014";
  position: absolute;
  left: 0;
  color: var(--intent);
}

@media (prefers-reduced-motion: reduce) {
  *,
  *::before,
  *::after {
    animation-duration: 0.01ms !important;
    animation-iteration-count: 1 !important;
    transition-duration: 0.01ms !important;
  }
}"""


def _layout_css() -> str:
    centered = GridPattern.CENTERED.value
    two = GridPattern.TWO_COLUMN.value
    mirrored = GridPattern.TWO_COLUMN_MIRRORED.value
    opening = DeclarationType.FOCUS_OPENING.value
    emphasis = DeclarationType.EMPHASIS.value
    return f""".surface {{
  max-width: 1200px;
  margin-left: auto;
  margin-right: auto;
  display: flex;
  flex-direction: column;
}}

.section {{
  background: var(--structure);
  padding: var(--section-padding-y) var(--section-padding-x);
}}

[data-grid="{centered}"] {{
  display: flex;
  flex-direction: column;
  align-items: center;
  text-align: center;
  gap: var(--section-gap);
}}

[data-grid="{two}"] {{
  display: grid;
  grid-template-columns: 1fr 1fr;
  align-items: start;
  gap: var(--section-gap);
}}

[data-grid="{mirrored}"] {{
  display: grid;
  grid-template-columns: 1fr 1fr;
  align-items: start;
  gap: var(--section-gap);
  direction: rtl;
}}

[data-grid="{mirrored}"] > * {{
  direction: ltr;
}}

[data-decl="{opening}"] {{
  padding-top: calc(var(--section-padding-y) * 1.5);
  padding-bottom: calc(var(--section-padding-y) * 1.5);
}}

[data-decl="{emphasis}"] {{
  background: var(--context);
  padding-top: calc(var(--section-padding-y) * 1.25);
  padding-bottom: calc(var(--section-padding-y) * 1.25);
}}

@media (max-width: 900px) {{
  [data-grid="{two}"],
  [data-grid="{mirrored}"] {{
    grid-template-columns: 1fr;
    direction: ltr;
  }}
}}"""


def generate_css() -> str:
    """Return the complete site stylesheet."""
    blocks = [
        "/* Design System CSS - Generated */\n/* DO NOT EDIT MANUALLY */",
        f"/* Tokens */\n{tokens_to_css_variables(TOKENS)}",
        f"/* Reset */\n{RESET_CSS}",
        f"/* Base */\n{BASE_CSS}",
        f"/* Layout */\n{_layout_css()}",
        f"/* Typography */\n{TYPOGRAPHY_CSS}",
        f"/* Components */\n{COMPONENTS_CSS}",
    ]
    return "\n\n".join(blocks) + "\n"
