"""Matcher Module - Ranking target pools for a subject, with result caching."""
from personalization.matcher.service import MatchingService, context_fingerprint

__all__ = ['MatchingService', 'context_fingerprint']
