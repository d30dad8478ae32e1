from .models import BeautifyResult, CleanOptions, Report
from .normalize import beautify_csv, build_change_log

__all__ = ["BeautifyResult", "CleanOptions", "Report", "beautify_csv", "build_change_log"]
