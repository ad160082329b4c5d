from .run_info import RunInfo, parse_run_info, build_read_structure, format_date
