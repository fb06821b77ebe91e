"""Structured types and closed vocabularies for common generation tasks.

Every model here can be passed straight to `SessionManager.generate` as a
schema; `Guide` annotations carry the generation constraints.
"""

from .article import Article, ArticleSection, ContentComplexity, ContentSummary, SummaryStyle
from .forms import ContactInfo, EventInfo, ProductInfo, SocialMediaHandle
from .restaurant import CUISINES, DayOfWeek, OperatingHours, PriceRange, Restaurant, RestaurantFeature, RestaurantLocation
from .review import MovieReview, ReviewSentiment
from .sentiment import (
    ComparisonResult,
    Emotion,
    EmotionScore,
    Sentiment,
    SentimentAnalysis,
    SentimentComparison,
    TextTone,
)

__all__ = [
    "MovieReview", "ReviewSentiment",
    "Restaurant", "RestaurantLocation", "OperatingHours", "PriceRange", "DayOfWeek", "RestaurantFeature", "CUISINES",
    "SentimentAnalysis", "SentimentComparison", "EmotionScore", "Emotion", "Sentiment", "TextTone",
    "ComparisonResult",
    "Article", "ArticleSection", "ContentComplexity", "ContentSummary", "SummaryStyle",
    "ContactInfo", "SocialMediaHandle", "EventInfo", "ProductInfo",
]
