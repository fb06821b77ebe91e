"""Tests for the ready-made generable types."""

from __future__ import annotations

from modelkit.catalog import (
    CUISINES,
    ComparisonResult,
    ContactInfo,
    EventInfo,
    MovieReview,
    OperatingHours,
    PriceRange,
    Restaurant,
    RestaurantLocation,
    ReviewSentiment,
    Sentiment,
    SentimentAnalysis,
    SummaryStyle,
)
from modelkit.schema import EnumOf, MemberOf, Range, ViolationKind, from_model, validate


class TestDefaults:
    def test_movie_review(self) -> None:
        review = MovieReview()
        assert review.title == ""
        assert review.sentiment is ReviewSentiment.NEUTRAL
        assert review.rating == 5
        assert review.themes == []
        assert review.is_recommended is False

    def test_restaurant(self) -> None:
        restaurant = Restaurant()
        assert restaurant.price_range is PriceRange.MODERATE
        assert restaurant.location.zip_code == "00000"
        assert len(OperatingHours().days_open) == 7

    def test_sentiment_analysis(self) -> None:
        analysis = SentimentAnalysis()
        assert analysis.primary_sentiment is Sentiment.NEUTRAL
        assert analysis.confidence == 0.5
        assert analysis.subjectivity == 0.5

    def test_enum_members(self) -> None:
        assert [p.value for p in PriceRange] == ["$", "$$", "$$$", "$$$$"]
        assert len(Sentiment) == 5
        assert {c.value for c in ComparisonResult} == {"Text 1", "Text 2", "Equal"}
        assert SummaryStyle.BRIEF.value == "brief and concise"


class TestDescriptors:
    def test_review_rating_range(self) -> None:
        assert from_model(MovieReview).constraint_of("rating") == Range(1, 10)

    def test_cuisine_vocabulary(self) -> None:
        assert from_model(Restaurant).constraint_of("cuisine_type") == MemberOf(CUISINES)

    def test_tone_is_an_enum(self) -> None:
        tone = from_model(SentimentAnalysis).fields["tone"]
        assert isinstance(tone, EnumOf)
        assert "casual" in tone.values

    def test_zip_code_pattern(self) -> None:
        schema = from_model(RestaurantLocation)
        base = {"address": "1 Congress Ave", "city": "Austin", "neighborhood": "Downtown"}
        assert validate(schema, {**base, "zip_code": "78701"}).ok
        assert validate(schema, {**base, "zip_code": "78701-1234"}).ok
        assert validate(schema, {**base, "zip_code": "7870"}).at("zip_code")[0].kind == ViolationKind.REGEX

    def test_nested_emotion_intensity(self) -> None:
        value = {
            "primary_sentiment": "Positive",
            "confidence": 0.9,
            "emotions": [{"emotion": "joy", "intensity": 0.8}, {"emotion": "trust", "intensity": 1.5}],
            "key_phrases": ["love it"],
            "tone": "casual",
            "subjectivity": 0.7,
        }
        result = validate(from_model(SentimentAnalysis), value)
        assert [(v.path, v.kind) for v in result] == [("emotions[1].intensity", ViolationKind.RANGE)]

    def test_contact_email_pattern(self) -> None:
        schema = from_model(ContactInfo)
        contact = ContactInfo(first_name="Ada", email="ada@example.com").model_dump(mode="json")
        assert validate(schema, contact).ok
        assert validate(schema, {**contact, "email": "ada at example"}).at("email")

    def test_event_default_description_is_valid(self) -> None:
        assert validate(from_model(EventInfo), EventInfo().model_dump(mode="json")).ok
