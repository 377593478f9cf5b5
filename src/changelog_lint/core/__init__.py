"""Changelog parsing core: line index, block tree, heading tree and grammar."""
