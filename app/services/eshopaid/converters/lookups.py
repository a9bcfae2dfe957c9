"""Closed lookup tables shared by the record converters."""

PAYMENT_MODE_MAP: dict[str, str] = {
    "shopify_payments": "CreditCard",
    "paypal": "PayPal",
    "razorpay": "OnlinePayment",
    "paytm": "OnlinePayment",
    "cod": "Cash",
    "cash_on_delivery": "Cash",
    "manual": "Cash",
}

DEFAULT_PAYMENT_MODE = "OnlinePayment"

# Indian GST state codes, keyed by lower-case state name
GST_STATE_CODES: dict[str, str] = {
    "jammu and kashmir": "01",
    "himachal pradesh": "02",
    "punjab": "03",
    "chandigarh": "04",
    "uttarakhand": "05",
    "haryana": "06",
    "delhi": "07",
    "rajasthan": "08",
    "uttar pradesh": "09",
    "bihar": "10",
    "sikkim": "11",
    "arunachal pradesh": "12",
    "nagaland": "13",
    "manipur": "14",
    "mizoram": "15",
    "tripura": "16",
    "meghalaya": "17",
    "assam": "18",
    "west bengal": "19",
    "jharkhand": "20",
    "odisha": "21",
    "chattisgarh": "22",
    "madhya pradesh": "23",
    "gujarat": "24",
    "dadra and nagar haveli": "26",
    "maharashtra": "27",
    "karnataka": "29",
    "goa": "30",
    "lakshadweep": "31",
    "kerala": "32",
    "tamil nadu": "33",
    "puducherry": "34",
    "andaman and nicobar": "35",
    "telangana": "36",
    "andhra pradesh": "37",
    "ladakh": "38",
}


def map_payment_gateway(gateway: str | None) -> str:
    """
    Map a Shopify payment gateway to an eShopaid payment mode.

    Examples:
        >>> map_payment_gateway("razorpay")
        'OnlinePayment'
        >>> map_payment_gateway("COD")
        'Cash'
        >>> map_payment_gateway(None)
        'OnlinePayment'
    """
    if not gateway:
        return DEFAULT_PAYMENT_MODE
    return PAYMENT_MODE_MAP.get(gateway.strip().lower(), DEFAULT_PAYMENT_MODE)


def get_state_gst_code(state_name: str | None) -> str:
    """
    Resolve the GST jurisdiction code of an Indian state.

    Examples:
        >>> get_state_gst_code("Delhi")
        '07'
        >>> get_state_gst_code("Atlantis")
        ''
    """
    if not state_name:
        return ""
    return GST_STATE_CODES.get(state_name.strip().lower(), "")
