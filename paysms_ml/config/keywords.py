"""Keyword tables for Korean card/bank SMS.

All lookups against these tables are substring matches on lowercased text
unless the consumer says otherwise.
"""

# Signals that a message is certainly not a completed payment
NON_PAYMENT_KEYWORDS: tuple[str, ...] = (
    # Authentication / security
    "인증", "authentication", "verification", "code",
    "OTP", "본인확인", "비밀번호",
    # Sent from abroad
    "국외발신", "국제발신", "해외발신",
    # Advertising
    "광고", "무료수신거부", "수신거부", "080",
    "홍보", "이벤트", "혜택안내", "포인트 적립",
    "특가", "증정", "당첨", "축하", "최저가", "마감직전",
    "프로모션", "할인쿠폰", "무료체험",
    # Notices
    "안내문", "점검", "정기점검", "공지사항",
    "불편을 드려",
    # Statements and upcoming charges (not an actual payment)
    "결제내역", "명세서", "청구서", "이용대금", "결제예정", "결제일",
    "결제금액", "카드대금", "결제대금", "청구금액",
    "출금예정", "출금 예정", "자동이체", "납부안내", "납입일",
    # Delivery
    "배송", "택배", "운송장", "주문",
    # Misc
    "퇴직",
    "설문", "survey", "투표",
    "예약은", "방문때", "접수 완료",
    "보험금", "해외원화결제시", "수수료 발생", "차단신청",
    # Financial advertising
    "금리", "대출", "투자", "수익", "분양", "모델하우스",
)

# At least one of these (or an "N원" amount) must appear in a payment SMS
PAYMENT_HINT_KEYWORDS: tuple[str, ...] = (
    "승인", "결제", "출금", "이체",
    "원", "USD", "JPY", "EUR",
    "카드", "체크", "CMS",
    "입금", "급여", "월급", "송금", "환급", "정산", "잔액", "취소",
)

# Issuer keywords (lowercase) in priority order, each with the card name it
# reports; the first hit names the card
CARD_KEYWORDS: tuple[tuple[str, str], ...] = (
    ("kb", "KB국민"), ("국민", "KB국민"), ("노리", "KB국민"),
    ("신한", "신한"), ("sol", "신한"), ("쏠", "신한"),
    ("삼성", "삼성"),
    ("현대", "현대"),
    ("롯데", "롯데"),
    ("하나", "하나"),
    ("우리", "우리"),
    ("nh", "NH"), ("농협", "NH"),
    ("bc", "BC"), ("비씨", "BC"),
    ("씨티", "씨티"), ("시티", "씨티"), ("citi", "씨티"),
    ("카카오", "카카오뱅크"), ("카뱅", "카카오뱅크"),
    ("토스", "토스"),
    ("케이뱅크", "케이뱅크"), ("k뱅크", "케이뱅크"),
    ("ibk", "IBK기업"), ("기업", "IBK기업"),
    ("sc제일", "SC제일"), ("제일은행", "SC제일"),
    ("수협", "수협"),
    ("광주은행", "광주"), ("kjb", "광주"),
    ("전북은행", "전북"), ("jb", "전북"),
    ("경남은행", "경남"), ("bnk", "BNK"), ("부산은행", "부산"),
    ("대구은행", "대구"), ("dgb", "대구"),
    ("새마을", "MG새마을금고"), ("mg", "MG새마을금고"), ("kfcc", "MG새마을금고"),
    ("신협", "신협"),
    ("우체국", "우체국"), ("우정", "우체국"), ("post", "우체국"),
    ("ok저축", "OK저축은행"), ("저축은행", "저축은행"),
    ("체크카드", "체크카드"), ("신용카드", "신용카드"), ("선불", "선불"), ("후불", "후불"),
)

DEFAULT_CATEGORY = "기타"
UNCLASSIFIED_CATEGORY = "미분류"

CATEGORIES: tuple[str, ...] = (
    "식비", "카페", "술/유흥", "교통", "쇼핑", "구독", "의료/건강", "운동",
    "문화/여가", "교육", "주거", "생활", "경조", "배달", "보험", "계좌이체",
    DEFAULT_CATEGORY,
)

# Store-name keywords per category; dict order is the lookup order
CATEGORY_KEYWORDS: dict[str, tuple[str, ...]] = {
    "식비": (
        "푸줏간", "정육", "고기", "삼겹살", "갈비", "한우", "소고기", "돼지고기",
        "초밥", "스시", "사시미", "라멘", "우동", "돈까스", "일식", "이자카야",
        "짜장", "짬뽕", "중국집", "중식", "마라탕", "훠궈",
        "한식", "찌개", "탕", "냉면", "비빔밥", "국밥", "설렁탕",
        "치킨", "BBQ", "교촌", "BHC", "굽네", "네네", "푸라닭",
        "피자", "도미노", "맥도날드", "버거킹", "KFC", "롯데리아", "맘스터치", "서브웨이",
        "김밥", "분식", "떡볶이", "라면", "국수",
        "편의점", "GS25", "CU", "세븐일레븐", "이마트24", "미니스톱",
        "이마트", "홈플러스", "롯데마트", "코스트코", "트레이더스", "마트", "하나로",
    ),
    "카페": (
        "스타벅스", "투썸", "이디야", "커피빈", "탐앤탐스", "할리스",
        "메가커피", "컴포즈", "빽다방", "더벤티", "파스쿠찌", "카페", "커피",
        "베이커리", "빵집", "제과", "던킨", "파리바게뜨", "뚜레쥬르",
        "배스킨라빈스", "설빙", "아이스크림", "빙수",
    ),
    "교통": (
        "택시", "카카오T", "우버", "버스", "지하철", "KTX", "SRT", "코레일",
        "주유소", "SK에너지", "GS칼텍스", "현대오일", "S-OIL",
        "하이패스", "톨게이트", "주차", "파킹",
    ),
    "쇼핑": (
        "쿠팡", "11번가", "G마켓", "옥션", "위메프", "티몬", "네이버쇼핑", "SSG",
        "무신사", "지그재그", "에이블리", "29CM", "유니클로", "자라",
        "올리브영", "화장품", "다이소", "이케아", "오늘의집",
    ),
    "구독": (
        "넷플릭스", "유튜브", "스포티파이", "멜론", "왓챠", "웨이브", "티빙",
        "쿠팡플레이", "디즈니플러스", "구독", "정기결제", "멤버십",
    ),
    "의료/건강": ("병원", "의원", "클리닉", "치과", "안과", "피부과", "내과", "약국"),
    "운동": ("헬스", "피트니스", "요가", "필라테스"),
    "문화/여가": (
        "CGV", "메가박스", "롯데시네마", "영화", "에버랜드", "롯데월드",
        "노래방", "PC방", "볼링장", "호텔", "펜션", "야놀자", "여기어때", "공연",
    ),
    "교육": ("학원", "교육", "인강", "서점", "교보문고", "영풍문고", "알라딘", "예스24"),
    "생활": ("통신", "SKT", "LG유플러스", "알뜰폰", "관리비", "공과금", "미용실", "헤어", "네일"),
    "배달": ("배달의민족", "요기요", "쿠팡이츠", "배민", "땡겨요", "배달"),
    "보험": ("보험", "보험료"),
}

# Synonyms an LLM tends to return, mapped onto CATEGORIES
CATEGORY_ALIASES: dict[str, str] = {
    "온라인쇼핑": "쇼핑", "인터넷쇼핑": "쇼핑", "온라인": "쇼핑", "마트": "쇼핑",
    "편의점": "식비", "음식": "식비", "식사": "식비",
    "의료": "의료/건강", "건강": "의료/건강", "병원": "의료/건강", "약국": "의료/건강",
    "보험료": "보험",
    "문화": "문화/여가", "여가": "문화/여가", "여행": "문화/여가",
    "엔터테인먼트": "문화/여가", "오락": "문화/여가", "레저": "문화/여가",
    "술": "술/유흥", "유흥": "술/유흥", "음주": "술/유흥", "호프": "술/유흥",
    "대중교통": "교통", "택시": "교통", "주유": "교통",
    "헬스": "운동", "피트니스": "운동", "스포츠": "운동", "체육": "운동",
    "부동산": "주거", "임대": "주거", "월세": "주거", "전세": "주거",
    "공과금": "생활", "통신": "생활",
    "경조사": "경조", "축의금": "경조", "조의금": "경조", "부조": "경조",
    "이체": "계좌이체", "송금": "계좌이체",
    "미분류": DEFAULT_CATEGORY, "알수없음": DEFAULT_CATEGORY, "불명": DEFAULT_CATEGORY,
    "배달음식": "배달", "배민": "배달", "요기요": "배달",
    "커피": "카페", "디저트": "카페",
}

# Tokens that disqualify a line from being a store name
STORE_STRUCTURAL_KEYWORDS: tuple[str, ...] = (
    "출금", "입금", "승인", "결제", "이체", "잔액",
    "[web발신]", "누적", "일시불", "할부", "체크카드", "해외승인",
)

# Tokens that disqualify a regex-captured store candidate
STORE_CAPTURE_INVALID_KEYWORDS: tuple[str, ...] = (
    "승인", "결제", "출금", "입금", "누적", "잔액", "일시불", "할부", "이용", "카드",
)

# Tokens that disqualify a regex-captured card name
CARD_CAPTURE_INVALID_KEYWORDS: tuple[str, ...] = (
    "web발신", "국외발신", "국제발신", "해외발신", "광고", "안내", "알림",
)

# Tokens that disqualify a heuristically extracted store name
STORE_EXCLUDE_KEYWORDS: tuple[str, ...] = (
    "web발신", "국외발신", "국제발신", "해외발신",
    "ltcard", "card.kr", ".kr", ".com", "http", "www",
    "기준", "누적", "잔액", "한도", "가용",
    "일시불", "할부", "취소", "승인", "결제", "출금", "사용", "입금", "이체",
    "체크", "신용", "님", "고객", "회원",
    "원", "건", "월", "일", "시", "분",
    "sms", "mms", "안내", "알림", "통지",
)
