"""
Business services: payments, deposits, contract listings and admin reports
"""
from .contracts import ContractsController
from .deposits import DepositEngine, DepositReceipt
from .payments import PaymentEngine, PaymentReceipt
from .reports import ReportsService

__all__ = [
    'ContractsController',
    'DepositEngine',
    'DepositReceipt',
    'PaymentEngine',
    'PaymentReceipt',
    'ReportsService',
]
