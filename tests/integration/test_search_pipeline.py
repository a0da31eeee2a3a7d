import httpx
import pytest
from pytest_httpx import HTTPXMock

from py_search_ctr.service import ClinicalTrialsService, SearchRequest

from conftest import (
    CTGOV_URL,
    CTGOV_URL_RE,
    ICTRP_EMPTY_XML,
    ICTRP_SINGLE_TRIAL_XML,
    ICTRP_TWO_TRIALS_XML,
    ICTRP_URL,
    ICTRP_URL_RE,
    ctgov_payload,
    ctgov_study,
)

# Mark all tests in this file as integration tests
pytestmark = pytest.mark.integration


def _targets(httpx_mock: HTTPXMock) -> list[str]:
    return [str(r.url).split("?")[0] for r in httpx_mock.get_requests()]


@pytest.mark.asyncio
async def test_plain_search_is_served_by_ictrp(test_settings, httpx_mock: HTTPXMock):
    httpx_mock.add_response(url=ICTRP_URL_RE, content=ICTRP_TWO_TRIALS_XML)

    async with ClinicalTrialsService(test_settings) as service:
        response = await service.search_clinical_trials(
            SearchRequest(condition="Leukemia", maxResults=1000),
        )

    assert response.text.startswith("Found 2 clinical trials")
    assert "Countries: United Kingdom" in response.text
    request = httpx_mock.get_request()
    assert request.url.params["condition"] == "Leukemia"
    assert request.url.params["max"] == "50"


@pytest.mark.asyncio
async def test_city_search_walks_the_whole_fallback_chain(test_settings, httpx_mock: HTTPXMock):
    """London in the UK: ClinicalTrials.gov, ICTRP twice, ClinicalTrials.gov again."""
    httpx_mock.add_response(url=CTGOV_URL_RE, status_code=500)
    httpx_mock.add_response(url=ICTRP_URL_RE, status_code=404)
    httpx_mock.add_response(url=ICTRP_URL_RE, status_code=404)
    httpx_mock.add_response(
        url=CTGOV_URL_RE,
        json=ctgov_payload(ctgov_study(countries=("United Kingdom", "United Kingdom"))),
    )

    async with ClinicalTrialsService(test_settings) as service:
        response = await service.search_clinical_trials(
            SearchRequest(query="London", country="United Kingdom", condition="Leukemia"),
        )

    assert _targets(httpx_mock) == [CTGOV_URL, ICTRP_URL, ICTRP_URL, CTGOV_URL]
    first_ictrp, second_ictrp = httpx_mock.get_requests(url=ICTRP_URL_RE)
    assert first_ictrp.url.params["search"] == "London"
    assert first_ictrp.url.params["country"] == "United Kingdom"
    assert "country" not in second_ictrp.url.params

    assert response.text.startswith("Found 1 clinical trials")
    assert "Trial ID: NCT98765432" in response.text
    assert "Countries: United Kingdom\n" in response.text
    assert "Enrollment Target: 250" in response.text


@pytest.mark.asyncio
async def test_city_search_with_undecodable_ctgov_body_falls_back_to_ictrp(
    test_settings, httpx_mock: HTTPXMock,
):
    httpx_mock.add_response(url=CTGOV_URL_RE, content=b'{"FullStudiesResponse": "\xff\xfe bad"}')
    httpx_mock.add_response(url=ICTRP_URL_RE, content=ICTRP_SINGLE_TRIAL_XML)

    async with ClinicalTrialsService(test_settings) as service:
        response = await service.search_clinical_trials(
            SearchRequest(query="London", country="United Kingdom", condition="Leukemia"),
        )

    assert _targets(httpx_mock) == [CTGOV_URL, ICTRP_URL]
    assert not response.is_error
    assert "Trial ID: NCT01234567" in response.text


@pytest.mark.asyncio
async def test_city_search_total_failure_reports_error(test_settings, httpx_mock: HTTPXMock):
    httpx_mock.add_response(url=CTGOV_URL_RE, status_code=500)
    httpx_mock.add_response(url=ICTRP_URL_RE, status_code=404)
    httpx_mock.add_response(url=ICTRP_URL_RE, status_code=404)
    httpx_mock.add_response(url=CTGOV_URL_RE, status_code=404)

    async with ClinicalTrialsService(test_settings) as service:
        response = await service.search_clinical_trials(
            SearchRequest(query="London", country="United Kingdom", condition="Leukemia"),
        )

    assert response.is_error
    assert len(httpx_mock.get_requests(url=CTGOV_URL_RE)) == 2
    assert "status: 404" in response.text
    assert 'For city-based searches like "London"' in response.text


@pytest.mark.asyncio
async def test_timeout_is_reported_with_connectivity_hint(test_settings, httpx_mock: HTTPXMock):
    httpx_mock.add_exception(httpx.ConnectTimeout("timed out"), url=ICTRP_URL_RE)

    async with ClinicalTrialsService(test_settings) as service:
        response = await service.search_clinical_trials(SearchRequest(condition="Flu"))

    assert response.is_error
    assert "Request timeout while contacting" in response.text
    assert "network connectivity issues" in response.text


@pytest.mark.asyncio
async def test_details_for_unknown_id_is_not_found(test_settings, httpx_mock: HTTPXMock):
    httpx_mock.add_response(url=ICTRP_URL_RE, content=ICTRP_EMPTY_XML)

    async with ClinicalTrialsService(test_settings) as service:
        response = await service.get_trial_details("NCT00000000")

    assert not response.is_error
    assert response.text == "No clinical trial found with ID: NCT00000000"
    assert httpx_mock.get_request().url.params["trialid"] == "NCT00000000"


@pytest.mark.asyncio
async def test_details_falls_back_to_ctgov_by_nct_id(test_settings, httpx_mock: HTTPXMock):
    httpx_mock.add_response(url=ICTRP_URL_RE, status_code=404)
    httpx_mock.add_response(url=ICTRP_URL_RE, status_code=404)
    httpx_mock.add_response(url=CTGOV_URL_RE, json=ctgov_payload(ctgov_study("NCT11112222")))

    async with ClinicalTrialsService(test_settings) as service:
        response = await service.get_trial_details("NCT11112222")

    ctgov_request = httpx_mock.get_requests(url=CTGOV_URL_RE)[0]
    assert ctgov_request.url.params["expr"] == "AREA[NCTId]:NCT11112222"
    assert response.text.startswith("Trial ID: NCT11112222\n")
    assert "URL: https://trialsearch.who.int/Trial2.aspx?TrialID=NCT11112222" in response.text
