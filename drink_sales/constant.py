"""Editable static menu used by the local backend, plus UI labels."""

from __future__ import annotations

CATEGORY_CATALOG: dict[str, dict[str, object]] = {
    "coffee": {"name": "커피", "sort_order": 1},
    "non_coffee": {"name": "논커피", "sort_order": 2},
    "tea": {"name": "티", "sort_order": 3},
    "ade": {"name": "에이드", "sort_order": 4},
}

# code -> (category id, display name, price, hot available, ice available)
MENU_CATALOG: dict[str, tuple[str, str, int, bool, bool]] = {
    "C01": ("coffee", "아메리카노", 4000, True, True),
    "C02": ("coffee", "카페라떼", 4500, True, True),
    "C03": ("coffee", "바닐라라떼", 5000, True, True),
    "C04": ("coffee", "카푸치노", 4500, True, False),
    "C05": ("coffee", "콜드브루", 4800, False, True),
    "N01": ("non_coffee", "초코라떼", 4800, True, True),
    "N02": ("non_coffee", "녹차라떼", 4800, True, True),
    "N03": ("non_coffee", "고구마라떼", 5000, True, True),
    "T01": ("tea", "얼그레이", 4000, True, True),
    "T02": ("tea", "캐모마일", 4000, True, False),
    "T03": ("tea", "유자차", 4500, True, True),
    "A01": ("ade", "레몬에이드", 5000, False, True),
    "A02": ("ade", "자몽에이드", 5000, False, True),
}

UNKNOWN_MENU_LABEL = "알 수 없음"
OTHER_CATEGORY_LABEL = "기타"

CSV_HEADER = ["날짜", "시간", "카테고리", "메뉴명", "온도", "가격"]
CLIPBOARD_HEADER = ["시간대", "합계"]

VIEW_INPUT = "input"
VIEW_DASHBOARD = "dashboard"
VIEW_REPORT = "report"
VIEWS = (VIEW_INPUT, VIEW_DASHBOARD, VIEW_REPORT)

VIEW_TITLES: dict[str, str] = {
    VIEW_INPUT: "입력",
    VIEW_DASHBOARD: "현황",
    VIEW_REPORT: "리포트",
}

TOP_MENU_LIMIT = 5
