import pytest

from sentloop.models import Segment, WordTimestamp


@pytest.fixture
def hi_bye_words() -> list[WordTimestamp]:
    return [
        WordTimestamp(text="Hi.", start_time=0.0, end_time=1.0),
        WordTimestamp(text=" Bye.", start_time=1.0, end_time=2.0),
    ]


@pytest.fixture
def lesson_words() -> list[WordTimestamp]:
    raw = [
        ("Welcome", 0.0, 0.8),
        (" to", 0.8, 1.0),
        (" our", 1.0, 1.3),
        (" audio", 1.3, 1.8),
        (" learning", 1.8, 2.4),
        (" experience.", 2.4, 3.5),
        (" This", 3.5, 3.8),
        (" application", 3.8, 4.8),
        (" helps", 4.8, 5.2),
        (" you", 5.2, 5.4),
        (" learn", 5.4, 5.8),
        (" by", 5.8, 6.0),
        (" listening!", 6.0, 6.7),
        (" Ready", 6.7, 7.2),
        (" to", 7.2, 7.4),
        (" start?", 7.4, 8.2),
    ]
    return [WordTimestamp(text=text, start_time=start, end_time=end) for text, start, end in raw]


@pytest.fixture
def three_segments() -> list[Segment]:
    return [
        Segment(text="One.", start_time=0.0, end_time=2.0),
        Segment(text="Two.", start_time=2.0, end_time=4.0),
        Segment(text="Three.", start_time=4.0, end_time=6.0),
    ]
