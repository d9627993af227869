"""Static truth-or-dare catalog.

Loaded once at import time and never mutated, so it is safe to read from
any number of rooms concurrently.
"""
from dataclasses import dataclass
from typing import Optional, Tuple

MODES = ('truth', 'dare')
LEVELS = ('easy', 'medium', 'hot')


@dataclass(frozen=True)
class Question:
    id: int
    type: str
    level: str
    text: str

    def to_dict(self):
        return {
            'id': self.id,
            'type': self.type,
            'level': self.level,
            'text': self.text,
        }


def _q(qid, qtype, level, text):
    return Question(id=qid, type=qtype, level=level, text=text)


QUESTIONS: Tuple[Question, ...] = (
    # Truths - easy
    _q(1, 'truth', 'easy', 'What is your favourite food?'),
    _q(2, 'truth', 'easy', 'What is your favourite movie of all time?'),
    _q(3, 'truth', 'easy', 'Which place in the world would you most like to visit?'),
    _q(4, 'truth', 'easy', 'What is your favourite hobby?'),
    _q(5, 'truth', 'easy', 'Beach or mountains?'),
    _q(6, 'truth', 'easy', 'Which song are you listening to on repeat right now?'),
    _q(7, 'truth', 'easy', 'Do you have a phobia?'),
    _q(8, 'truth', 'easy', 'Which superpower would you pick?'),
    # Truths - medium
    _q(9, 'truth', 'medium', 'What was your worst date ever?'),
    _q(10, 'truth', 'medium', "Have you ever lied to spare someone's feelings?"),
    _q(11, 'truth', 'medium', 'What is your biggest regret?'),
    _q(12, 'truth', 'medium', "Have you ever had a crush on a friend's ex?"),
    _q(13, 'truth', 'medium', 'What is your most embarrassing secret?'),
    _q(14, 'truth', 'medium', "Have you ever stalked someone's social media?"),
    _q(15, 'truth', 'medium', 'What is the biggest lie you have ever told?'),
    _q(16, 'truth', 'medium', 'Have you ever pretended not to have seen a message?'),
    # Truths - hot
    _q(17, 'truth', 'hot', 'What is your boldest fantasy?'),
    _q(18, 'truth', 'hot', 'What is the most unexpected place you have kissed someone?'),
    _q(19, 'truth', 'hot', 'Have you ever dreamt about the other player?'),
    _q(20, 'truth', 'hot', 'What is the most romantic thing anyone has done for you?'),
    _q(21, 'truth', 'hot', 'Have you ever sent a flirty photo?'),
    _q(22, 'truth', 'hot', 'What is the first thing you notice about someone you like?'),
    # Dares - easy
    _q(23, 'dare', 'easy', 'Do 10 squats'),
    _q(24, 'dare', 'easy', 'Sing your favourite song for 30 seconds'),
    _q(25, 'dare', 'easy', 'Do your best animal impression'),
    _q(26, 'dare', 'easy', 'Dance without music for 20 seconds'),
    _q(27, 'dare', 'easy', 'Say "I love you" to the last person you chatted with'),
    _q(28, 'dare', 'easy', 'Speak with a foreign accent for 2 minutes'),
    _q(29, 'dare', 'easy', 'Do 5 burpees'),
    _q(30, 'dare', 'easy', 'Post a story with a funny face'),
    # Dares - medium
    _q(31, 'dare', 'medium', 'Call someone and sing "Happy Birthday"'),
    _q(32, 'dare', 'medium', 'Send a voice note of yourself singing to your crush'),
    _q(33, 'dare', 'medium', 'Post a fake confession on social media'),
    _q(34, 'dare', 'medium', "Like your ex's 10 most recent posts"),
    _q(35, 'dare', 'medium', 'Let the other player pick your profile picture for a day'),
    _q(36, 'dare', 'medium', 'Call a random pizza place and ask if they sell sushi'),
    _q(37, 'dare', 'medium', 'Send a flirty message to the last person who texted you'),
    # Dares - hot
    _q(38, 'dare', 'hot', 'Give the other player a kiss'),
    _q(39, 'dare', 'hot', 'Slow dance with the other player for one song'),
    _q(40, 'dare', 'hot', 'Whisper something flirty in the other player\'s ear'),
    _q(41, 'dare', 'hot', 'Give the other player a 2 minute shoulder massage'),
    _q(42, 'dare', 'hot', 'Swap one item of clothing with the other player'),
    _q(43, 'dare', 'hot', 'Pay the other player your boldest compliment'),
)

_BY_ID = {q.id: q for q in QUESTIONS}


def questions_of(qtype: str, level: Optional[str] = None) -> Tuple[Question, ...]:
    """Return the prompts of one type, optionally narrowed to a level.

    Catalog order is preserved. An unknown type gives an empty tuple.
    """
    return tuple(
        q for q in QUESTIONS
        if q.type == qtype and (level is None or q.level == level)
    )


def get_question(question_id: int) -> Optional[Question]:
    return _BY_ID.get(question_id)
