"""
Analysis package for md-i18n.

This package contains the pure, filesystem-free logic: hunk
classification, markdown section segmentation, hunk-to-section mapping
and structural fingerprint extraction.
"""
