"""Pytest configuration and fixtures for annotation_compiler tests"""

import pytest
import tempfile
import shutil
from pathlib import Path
import sys

# Add src to path for all tests
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

from annotation_compiler.config import Config
from annotation_compiler.model import Element, Module, Parameter
from annotation_compiler.registry import GenerationContext


def make_constant(name, description=''):
    return Element(kind='CONSTANT', name=name, description=description)


def make_function(name, parameters=None, returnvalues=None, description=''):
    return Element(
        kind='FUNCTION',
        name=name,
        description=description,
        parameters=parameters or [],
        returnvalues=returnvalues or [],
    )


def make_parameter(name, types, doc='', is_optional=False):
    return Parameter(name=name, types=list(types), doc=doc or name, is_optional=is_optional)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing"""
    temp = tempfile.mkdtemp()
    yield Path(temp)
    shutil.rmtree(temp, ignore_errors=True)


@pytest.fixture
def config(temp_dir, monkeypatch):
    """Default configuration writing into a temporary api folder"""
    monkeypatch.delenv('ANNOTATION_COMPILER_STRICT', raising=False)
    return Config(api_folder=temp_dir / 'api')


@pytest.fixture
def context(config):
    """Fresh per-run generation context"""
    return GenerationContext(config)


@pytest.fixture
def gui_module():
    """GUI module with playback, property and easing constants"""
    return Module(
        namespace='gui',
        brief='Test GUI module',
        description='Used to test constant aliases',
        elements=[
            make_constant('gui.PLAYBACK_LOOP_FORWARD', 'loop forward'),
            make_constant('gui.PLAYBACK_LOOP_BACKWARD', 'loop backward'),
            make_constant('gui.PLAYBACK_ONCE_FORWARD', 'once forward'),
            make_constant('gui.PLAYBACK_ONCE_BACKWARD', 'once backward'),
            make_constant('gui.PLAYBACK_ONCE_PINGPONG', 'once ping pong'),
            make_constant('gui.PROP_POSITION', 'position property'),
            make_constant('gui.PROP_SCALE', 'scale property'),
            make_constant('gui.EASING_LINEAR', 'linear easing'),
            make_constant('gui.EASING_INQUAD', 'quadratic easing'),
            make_function('gui.animate', description='Test animation function', parameters=[
                make_parameter('node', ['node'], 'node to animate'),
                make_parameter(
                    'property', ['string', 'constant'],
                    'property to animate\n<ul>\n<li><code>gui.PROP_POSITION</code></li>\n'
                    '<li><code>gui.PROP_SCALE</code></li>\n</ul>',
                ),
                make_parameter(
                    'easing', ['vector', 'constant'],
                    'easing mode\n<ul><li><code>gui.EASING_*</code></li></ul>',
                ),
                make_parameter(
                    'playback', ['constant'],
                    '\n'.join([
                        'playback mode',
                        '<ul>',
                        '<li><code>gui.PLAYBACK_ONCE_FORWARD</code></li>',
                        '<li><code>gui.PLAYBACK_ONCE_BACKWARD</code></li>',
                        '<li><code>gui.PLAYBACK_ONCE_PINGPONG</code></li>',
                        '<li><code>gui.PLAYBACK_LOOP_FORWARD</code></li>',
                        '<li><code>gui.PLAYBACK_LOOP_BACKWARD</code></li>',
                        '</ul>',
                    ]),
                    is_optional=True,
                ),
            ]),
        ],
    )
