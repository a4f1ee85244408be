"""Conversions between pixel buffers and OpenCV matrices."""
