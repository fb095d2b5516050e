"""Shared fixtures: inline seller CSV exports and a record factory."""

from __future__ import annotations

import logging
import textwrap
from datetime import date

import pytest

import logging_setup
from model import TransactionRecord


def _dedent(s: str) -> str:
    return textwrap.dedent(s).lstrip("\n")


@pytest.fixture
def sample_csv() -> str:
    return _dedent(
        """
        Date,ITEAMS,PAYMENT,GST,ITEM RATE,PROFIT,QUANTITY,RETURN / CANCEL
        01-03-2024,Widget,100,10,50,20,2,
        02-03-2024,Gadget,250.5,25.5,125.25,40,1,
        04-03-2024,Widget,300,30,50,60,6,Cancel
        09-03-2024,Gizmo,80,8,20,15,4,RR
        15-03-2024,Gadget,500,50,125,90,4,
        """
    )


@pytest.fixture
def make_record():
    def _make(
        d: date,
        item="Widget",
        payment=0.0,
        gst=0.0,
        profit=0.0,
        quantity=0,
        type="SALE",
        rate=0.0,
    ) -> TransactionRecord:
        return TransactionRecord(
            date=d,
            item=item,
            payment=payment,
            gst=gst,
            rate=rate,
            profit=profit,
            quantity=quantity,
            type=type,
        )

    return _make


@pytest.fixture(autouse=True)
def _reset_logging():
    """Entry points configure logging once per process; undo it after each test
    so a handler never outlives the stream CliRunner gave it."""
    yield
    logger = logging.getLogger(logging_setup.LOGGER_NAME)
    for h in list(logger.handlers):
        logger.removeHandler(h)
    logging_setup._CONFIGURED = False
