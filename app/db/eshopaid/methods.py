"""
SERVICE_METHODNAME values understood by the eShopaid ProcessData endpoint.
"""

from enum import Enum


class ServiceMethod(str, Enum):
    """Operation selector sent in the SERVICE_METHODNAME header."""

    GET_TOKEN = "GetToken"
    CREATE_SALES_ORDER = "CreateSalesOrder"
    SET_ORDER_STATUS = "SetOrderStatus"
    CREATE_RETURN_ORDER = "CreateReturnOrder"
    GET_ORDER_DETAIL = "GetOrderDetail"
    ADD_CUSTOMER = "AddCustomer"
    MODIFY_CUSTOMER = "ModifyCustomer"
    GET_INVENTORY = "GetInventory"
