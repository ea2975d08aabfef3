from __future__ import annotations

import random
from typing import Optional

EMOTIONS = [
    "행복한", "우울한", "분노한", "설레는", "지친", "심심한", "짜증난", "흥분한", "차분한",
    "기쁜", "슬픈", "두려운", "놀란", "안도한", "외로운", "무기력한", "용감한", "지루한", "감사한",
    "부끄러운", "짜릿한", "활기찬", "불안한", "평온한", "혼란스러운", "열정적인", "피곤한", "행운의",
    "의기양양한", "억울한", "걱정스러운", "서운한", "감동한", "냉정한", "짜증스러운", "신나는", "긴장한",
    "고마운", "당황한", "안타까운", "편안한", "의심스러운", "무서운", "자신감있는", "기대하는", "자유로운",
    "설득력있는", "상쾌한", "유쾌한", "상심한", "순수한", "매혹적인", "따뜻한", "냉담한", "우쭐한",
    "침착한", "화가난", "자랑스러운", "분명한", "감사하는", "불편한", "의욕적인", "감정적인", "평화로운",
    "후회하는", "감탄하는", "사랑스러운", "집중하는", "경쾌한", "복잡한", "명랑한", "신비로운", "활발한",
    "현명한", "도전적인", "결단력있는", "섬세한", "단호한", "기민한", "똑똑한", "유능한", "사려깊은",
    "따분한", "포근한", "풍부한", "조용한", "담대한", "풍요로운", "은은한", "자비로운", "정직한", "성실한",
    "겸손한", "대담한", "명확한", "순진한", "다정한",
]

ANIMALS = [
    "고양이", "강아지", "토끼", "너구리", "판다", "고슴도치", "부엉이", "기린", "곰",
    "여우", "하마", "코끼리", "사자", "늑대", "펭귄", "다람쥐", "호랑이", "수달", "카멜레온",
]


def generate_nickname(rng: Optional[random.Random] = None) -> str:
    rng = rng or random
    return f"{rng.choice(EMOTIONS)} {rng.choice(ANIMALS)}"
