import os.path
from egcg_core.config import cfg


def etc_config(config_file):
    return os.path.join(os.path.dirname(os.path.abspath(os.path.dirname(__file__))), 'etc', config_file)


def load_config():
    cfg.load_config_file(
        os.getenv('RUNINFOEXTRACTORCONFIG'),
        os.path.expanduser('~/.runinfoextractor.yaml'),
        etc_config('example_runinfoextractor.yaml')
    )


def default_delimiter():
    return cfg.query('run_info', 'delimiter') or '\t'


default = cfg
