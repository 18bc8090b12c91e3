"""Internship matching engine: explainable student/internship match scoring."""

__version__ = "2.0.0"
