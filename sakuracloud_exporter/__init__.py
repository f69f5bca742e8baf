"""Metric collectors for SAKURA Cloud bills, coupons, ESME, auto-backups, internet and local routers."""

__version__ = "0.1.0"