"""Tests for the exam sheet service."""
