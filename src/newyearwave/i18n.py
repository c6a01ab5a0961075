"""Simple two-language (ko/en) translation helper."""

_STRINGS: dict[str, dict[str, str]] = {
    "page_title": {
        "ko": "새해 물결",
        "en": "New Year Wave",
    },
    "subtitle_sweeping": {
        "ko": "{year}년이 지구를 휩쓰는 중",
        "en": "{year} Sweeping the Globe",
    },
    "subtitle_tracking": {
        "ko": "{year}년의 도착을 추적하는 중",
        "en": "Tracking {year}'s Arrival",
    },
    "countdown_label": {
        "ko": "물결 시작까지",
        "en": "Wave Starts In",
    },
    "label_utc": {
        "ko": "UTC 시각",
        "en": "UTC Time",
    },
    "label_local": {
        "ko": "현지 시각",
        "en": "Your Time",
    },
    "label_midnight": {
        "ko": "태양 자정 경도",
        "en": "Solar Midnight",
    },
    "label_coverage": {
        "ko": "진행률",
        "en": "Coverage",
    },
    "label_status": {
        "ko": "상태",
        "en": "Status",
    },
    "status_complete": {
        "ko": "완료 — 새해 복 많이 받으세요! 🎉",
        "en": "Complete — Happy New Year! 🎉",
    },
    "status_almost": {
        "ko": "거의 다 왔어요...",
        "en": "Almost There...",
    },
    "status_soon": {
        "ko": "곧 물결이 시작됩니다",
        "en": "Wave Starting Soon",
    },
    "status_awaiting": {
        "ko": "물결 시작을 기다리는 중",
        "en": "Awaiting Wave Start",
    },
    "region_pacific_start": {
        "ko": "물결 시작 — 태평양 섬들",
        "en": "Wave Beginning — Pacific Islands",
    },
    "region_east_asia": {
        "ko": "동아시아와 호주를 지나는 중",
        "en": "Crossing East Asia & Australia",
    },
    "region_south_asia": {
        "ko": "남아시아와 중동을 지나는 중",
        "en": "Crossing South Asia & Middle East",
    },
    "region_europe_africa": {
        "ko": "유럽과 아프리카를 지나는 중",
        "en": "Crossing Europe & Africa",
    },
    "region_atlantic": {
        "ko": "대서양을 건너는 중",
        "en": "Crossing the Atlantic",
    },
    "region_americas": {
        "ko": "아메리카 대륙을 지나는 중",
        "en": "Crossing the Americas",
    },
    "region_pacific_final": {
        "ko": "마지막 구간 — 태평양",
        "en": "Final Stretch — Pacific",
    },
    "loading_map": {
        "ko": "✦ 지도 데이터를 불러오는 중",
        "en": "✦ Loading map data",
    },
    "error_map": {
        "ko": "지도를 불러오지 못했어요. ({error})",
        "en": "Failed to load map. ({error})",
    },
    "btn_retry": {
        "ko": "다시 시도",
        "en": "Try Again",
    },
    "btn_locate": {
        "ko": "📍 내 위치 찾기",
        "en": "📍 Find My Location",
    },
    "locating": {
        "ko": "위치를 확인하는 중...",
        "en": "Getting your location...",
    },
    "error_location": {
        "ko": "위치를 가져올 수 없어요",
        "en": "Unable to get your location",
    },
    "location_midnight": {
        "ko": "{year}년 1월 1일 당신의 태양 자정",
        "en": "Your solar midnight, Jan 1 {year}",
    },
    "in_year": {
        "ko": "✓ {year}년",
        "en": "✓ In {year}",
    },
    "waiting_year": {
        "ko": "{year}년을 기다리는 중",
        "en": "Waiting for {year}",
    },
    "you_marker": {
        "ko": "나",
        "en": "YOU",
    },
    "tooltip_midnight": {
        "ko": "{year}년 태양 자정",
        "en": "Solar midnight {year}",
    },
    "share_text": {
        "ko": "{year}년 새해가 실시간으로 지구를 휩쓰는 모습을 보세요! 🌍✨",
        "en": "Watch the {year} New Year sweep across the globe in real-time! 🌍✨",
    },
    "btn_tweet": {
        "ko": "X에 공유하기",
        "en": "Share on X",
    },
    "link_site": {
        "ko": "웹사이트",
        "en": "Website",
    },
    "timezone_map": {
        "ko": "시간대 기준 새해 지도 보기",
        "en": "See the time zone new year map",
    },
    "about": {
        "ko": "태양 자정은 경도에 따라 시간당 15°씩 서쪽으로 이동합니다 (평균 태양시).",
        "en": "Solar midnight moves west at 15° per hour of UTC (mean solar time).",
    },
}


def t(key: str, lang: str) -> str:
    """Return the translated string for key in lang.

    Falls back to 'en', then to the key itself if not found.
    """
    entry = _STRINGS.get(key)
    if entry is None:
        return key
    return entry.get(lang) or entry.get("en") or key
