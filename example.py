import argparse
import asyncio

from py_search_ctr.config import settings
from py_search_ctr.service import ClinicalTrialsService, SearchRequest


async def main(condition: str, country: str | None, city: str | None, trial_id: str | None):
    """
    Runs a search against the live registries and, optionally, looks up a
    single trial by its identifier.
    """
    async with ClinicalTrialsService(settings) as service:
        request = SearchRequest(condition=condition, country=country, query=city, max_results=5)
        if request.query and request.country:
            print(f"City search: {city} in {country} (ClinicalTrials.gov first)")
        else:
            print(f"Searching ICTRP for '{condition}'...")

        response = await service.search_clinical_trials(request)
        print(response.text)

        if trial_id:
            print(f"\nFetching details for {trial_id}...")
            details = await service.get_trial_details(trial_id)
            print(details.text)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Search clinical trial registries.")
    parser.add_argument("condition", help="Medical condition, e.g. 'Leukemia'.")
    parser.add_argument("--country", help="Country where the trial is conducted.")
    parser.add_argument("--city", help="City name; only used together with --country.")
    parser.add_argument("--trial-id", help="Also print the details of this trial.")
    args = parser.parse_args()

    asyncio.run(main(args.condition, args.country, args.city, args.trial_id))
