"""
Tests for environment accessors.
"""

import pytest

from pushline.errors import ConfigurationError
from pushline.utils.environment import read_docker_host


class TestReadDockerHost:
    """Tests for read_docker_host()."""

    def test_host_of_tcp_url(self):
        assert read_docker_host({"DOCKER_HOST": "tcp://1.2.3.4:2376"}) == "1.2.3.4"

    def test_hostname(self):
        assert read_docker_host({"DOCKER_HOST": "tcp://docker.internal:2375"}) == "docker.internal"

    @pytest.mark.parametrize("environ", [{}, {"DOCKER_HOST": ""}])
    def test_not_set(self, environ):
        with pytest.raises(ConfigurationError) as exc:
            read_docker_host(environ)
        assert "DOCKER_HOST environment variable not set" in str(exc.value)
        assert exc.value.field == "DOCKER_HOST"

    def test_no_host_component(self):
        with pytest.raises(ConfigurationError):
            read_docker_host({"DOCKER_HOST": "unix:///var/run/docker.sock"})

    def test_reads_process_environment(self, monkeypatch):
        monkeypatch.setenv("DOCKER_HOST", "tcp://10.0.0.5:2376")
        assert read_docker_host() == "10.0.0.5"
