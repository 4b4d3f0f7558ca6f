"""Enumerations and bounds shared by the tool schemas."""

from __future__ import annotations

from typing import Any

SORT_ORDER = ["asc", "desc"]
SEARCH_TYPES = ["domain", "domain_with_subdomains"]
KEYWORD_INTENTS = ["informational", "navigational", "commercial", "transactional"]
URL_OUTPUT_DATA_TYPES = ["traffic", "keywords"]
DOMAIN_REGIONS_SORT_FIELDS = ["keywords_count", "country_name_en", "db_name"]
RT_SERP_HISTORY_SORT_TYPES = ["keyword", "date"]
SITE_AUDIT_USER_AGENT_IDS = [0, 1, 2, 3, 4, 5]

MAIN_SEARCH_ENGINES = [
    "g_af", "g_al", "g_dz", "g_as", "g_ad", "g_ao", "g_ai", "g_ag", "g_ar", "g_am", "g_aw", "g_au", "g_at", "g_az",
    "g_bh", "g_bd", "g_bb", "g_by", "g_be", "g_bz", "g_bj", "g_bm", "g_bt", "g_bo", "g_ba", "g_bw", "g_br", "g_io",
    "g_vg", "g_bn", "g_bg", "g_bf", "g_bi", "g_kh", "g_cm", "g_ca", "g_cv", "g_ky", "g_cf", "g_td", "g_cl", "g_cn",
    "g_cx", "g_cc", "g_co", "g_km", "g_ck", "g_cr", "g_ci", "g_hr", "g_cw", "g_cy", "g_cz", "g_cd", "g_dk", "g_dj",
    "g_dm", "g_do", "g_ec", "g_eg", "g_sv", "g_gq", "g_er", "g_ee", "g_et", "g_fk", "g_fo", "g_fm", "g_fj", "g_fi",
    "g_fr", "g_gf", "g_pf", "g_ga", "g_ge", "g_de", "g_gh", "g_gi", "g_gr", "g_gl", "g_gd", "g_gp", "g_gu", "g_gt",
    "g_gg", "g_gn", "g_gw", "g_gy", "g_ht", "g_hn", "g_hk", "g_hu", "g_is", "g_in", "g_id", "g_iq", "g_ie", "g_im",
    "g_il", "g_it", "g_jm", "g_jp", "g_je", "g_jo", "g_kz", "g_ke", "g_ki", "g_kw", "g_kg", "g_la", "g_lv", "g_lb",
    "g_ls", "g_lr", "g_ly", "g_li", "g_lt", "g_lu", "g_mo", "g_mk", "g_mg", "g_mw", "g_my", "g_mv", "g_ml", "g_mt",
    "g_mh", "g_mq", "g_mr", "g_mu", "g_yt", "g_mx", "g_md", "g_mc", "g_mn", "g_me", "g_ms", "g_ma", "g_mz", "g_mm",
    "g_na", "g_nr", "g_np", "g_nl", "g_nc", "g_nz", "g_ni", "g_ne", "g_ng", "g_nu", "g_nf", "g_mp", "g_no", "g_om",
    "g_pk", "g_pw", "g_ps", "g_pa", "g_pg", "g_py", "g_pe", "g_ph", "g_pn", "g_pl", "g_pt", "g_pr", "g_qa", "g_cg",
    "g_re", "g_ro", "g_ru", "g_rw", "g_sh", "g_kn", "g_lc", "g_pm", "g_vc", "g_ws", "g_sm", "g_st", "g_sa", "g_sn",
    "g_rs", "g_sc", "g_sl", "g_sg", "g_sx", "g_sk", "g_si", "g_sb", "g_so", "g_za", "g_kr", "g_es", "g_lk", "g_sr",
    "g_sz", "g_se", "g_ch", "g_tw", "g_tj", "g_tz", "g_th", "g_bs", "g_gm", "g_tl", "g_tg", "g_tk", "g_to", "g_tt",
    "g_tn", "g_tr", "g_tm", "g_tc", "g_tv", "g_vi", "g_ug", "g_ua", "g_ae", "g_uk", "g_us", "g_uy", "g_uz", "g_vu",
    "g_va", "g_ve", "g_vn", "g_wf", "g_ye", "g_zm", "g_zw", "bing_us",
]

DOMAIN_NAME_REGEX = r"^([a-zA-Z0-9]([a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?\.)+[a-zA-Z]{2,}$"
DATE_REGEX = r"^\d{4}-(0[1-9]|1[012])-(0[1-9]|[12][0-9]|3[01])$"

MIN_DOMAIN_LENGTH = 4
MAX_DOMAIN_LENGTH = 253
MIN_PAGE = 1
DEFAULT_PAGE_SIZE = 100
MAX_PAGE_SIZE = 1000
MIN_KEYWORD_LENGTH = 1
MAX_KEYWORD_LENGTH = 100
MAX_KEYWORDS_ITEMS = 50
MAX_FILTER_COST = 200
MAX_FILTER_DIFFICULTY = 100
MAX_FILTER_POSITION = 100
MAX_FILTER_CONCURRENCY = 100
MAX_QUERIES_COUNT = 100_000_000
MIN_URL_CONTAIN_LENGTH = 3
MAX_URL_CONTAIN_LENGTH = 200
MAX_URL_PREFIX_LENGTH = 500

MIN_PROJECT_ID = 1
MIN_PROJECT_NAME_LENGTH = 1
MAX_PROJECT_NAME_LENGTH = 50
MAX_PROJECT_GROUP_NAME_LENGTH = 50
PROJECT_ALLOWED_PAGE_SIZES = [20, 50, 100, 500, 1000]
DEFAULT_PROJECT_PAGE_SIZE = 20

MIN_RT_PROJECT_ID = 1
MIN_RT_REGION_ID = 1
RT_ALLOWED_PAGE_SIZES = [20, 50, 100, 500]
DEFAULT_RT_PAGE_SIZE = 100
MAX_RT_KEYWORDS_FILTER = 1000

MIN_PAGE_ID = 1
MIN_REPORT_ID = 1
MIN_AUDIT_OFFSET = 0
DEFAULT_AUDIT_LIMIT = 30
DEFAULT_ERROR_ELEMENTS_LIMIT = 100

SITE_AUDIT_ERROR_DISPLAY_MODES = ["all", "new", "solved"]
SITE_AUDIT_SCHEDULE_REPEAT_IDS = [0, 1, 2, 3, 4, 5]
SITE_AUDIT_INTERVAL_IDS = [0, 1, 2, 3, 4, 5]
SITE_AUDIT_SCAN_TYPES = [1, 2, 3]
MIN_PAGES_LIMIT = 1
MIN_SCAN_SPEED = 1
MAX_SCAN_SPEED = 30
MIN_SCAN_DURATION = 1
MIN_FOLDER_DEPTH = 1
MIN_URL_DEPTH = 1
MIN_ERROR_THRESHOLD = 0


def domain_field(description: str) -> dict[str, Any]:
    return {
        "type": "string",
        "pattern": DOMAIN_NAME_REGEX,
        "minLength": MIN_DOMAIN_LENGTH,
        "maxLength": MAX_DOMAIN_LENGTH,
        "description": description,
    }


def search_engine_field(default: str | None = None, description: str = "Search engine database ID") -> dict[str, Any]:
    field: dict[str, Any] = {"type": "string", "enum": list(MAIN_SEARCH_ENGINES), "description": description}
    if default is not None:
        field["default"] = default
    return field


def sort_order_field(description: str | None = None) -> dict[str, Any]:
    field: dict[str, Any] = {"type": "string", "enum": list(SORT_ORDER)}
    if description:
        field["description"] = description
    return field


def page_fields(*, max_size: int = MAX_PAGE_SIZE, default_size: int = DEFAULT_PAGE_SIZE) -> dict[str, Any]:
    return {
        "page": {"type": "integer", "minimum": MIN_PAGE, "default": 1, "description": "Page number"},
        "size": {
            "type": "integer",
            "minimum": 1,
            "maximum": max_size,
            "default": default_size,
            "description": "Number of results per page",
        },
    }


def bounded(kind: str, minimum: float | None = None, maximum: float | None = None) -> dict[str, Any]:
    field: dict[str, Any] = {"type": kind}
    if minimum is not None:
        field["minimum"] = minimum
    if maximum is not None:
        field["maximum"] = maximum
    return field
