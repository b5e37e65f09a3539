"""Tests for gitscope."""
