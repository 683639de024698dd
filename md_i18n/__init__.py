"""
md-i18n: translation workflow tooling for markdown documentation.

The package tracks which documents of a source-language tree still need
translating, detects which sections of a document changed since it was
last translated, and checks that a translation keeps the structure of
its source.
"""
