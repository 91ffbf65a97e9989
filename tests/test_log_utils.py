import logging

from campusmap_lib.log_utils import RichLogFormatter, resolve_topics, setup_logging


def make_record(name, msg, level=logging.INFO, **extra):
    record = logging.LogRecord(name, level, __file__, 1, msg, None, None)
    record.__dict__.update(extra)
    return record


def test_resolve_topics_by_prefix():
    assert resolve_topics("gr, par") == {"graph", "parse"}
    assert resolve_topics("all") >= {"graph", "render", "campus"}
    assert resolve_topics("nope") == set()


def test_formatter_prefixes_every_line():
    text = RichLogFormatter().format(make_record("campusmap.graph", "one\ntwo"))
    assert text == "INFO :graph   : one\nINFO :graph   : two"


def test_formatter_passes_raw_records_through():
    text = RichLogFormatter(use_color=True).format(
        make_record("campusmap.render", "[00]\n[01]", raw=True)
    )
    assert text == "[00]\n[01]"


def test_formatter_colors_levels():
    text = RichLogFormatter(use_color=True).format(
        make_record("campusmap.main", "boom", level=logging.ERROR)
    )
    assert text.startswith("\033[38;5;210mERROR\033[0m")


def test_setup_logging_enables_debug_topics(tmp_path):
    log_file = tmp_path / "run.log"
    setup_logging(logging.WARNING, False, "graph", str(log_file))
    assert logging.getLogger("campusmap").level == logging.WARNING
    assert logging.getLogger("campusmap.graph").level == logging.DEBUG
    assert logging.getLogger("campusmap.parse").level == logging.NOTSET
    assert len(logging.getLogger("campusmap").handlers) == 2

    logging.getLogger("campusmap.graph").debug("settled %d", 3)
    for h in logging.getLogger("campusmap").handlers:
        h.flush()
    assert "graph   : settled 3" in log_file.read_text()
