#!/usr/bin/env python3
"""
Scoring Module - Aggregate scores, gaps and recommendations.

- models.py: MatchResult, MatchTier, CertificateGap, CertificateRecommendation
- scoring.py: Overall score, met counts, disqualifiers, eligibility
- gaps.py: Gap impact and acquisition estimates
- recommendations.py: Simulation-based recommendation ranking
- serialization.py: JSON-compatible dict conversion
"""

from certmatch.scorer.models import (
    BatchMatchSummary,
    CertificateGap,
    CertificateRecommendation,
    MatchResult,
    MatchTier,
)
from certmatch.scorer.scoring import ScoreOutcome, score_details
from certmatch.scorer.gaps import build_gaps
from certmatch.scorer.recommendations import RecommendationGenerator

__all__ = [
    'BatchMatchSummary',
    'CertificateGap',
    'CertificateRecommendation',
    'MatchResult',
    'MatchTier',
    'RecommendationGenerator',
    'ScoreOutcome',
    'build_gaps',
    'score_details',
]
