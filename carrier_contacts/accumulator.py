from carrier_contacts.schemas.contact import ContactRecord, LookupOutcome, OutcomeStatus


class RunAccumulator:
    """Append-only results of one run. Only the scheduling loop writes to it."""

    def __init__(self) -> None:
        self.records: list[ContactRecord] = []
        self.valid_urls: list[str] = []
        self.invalid = 0
        self.errors = 0

    @property
    def processed(self) -> int:
        return len(self.valid_urls) + self.invalid + self.errors

    def merge(self, outcomes: list[LookupOutcome]) -> None:
        for outcome in outcomes:
            if outcome.status == OutcomeStatus.valid:
                self.valid_urls.append(outcome.url)
                if outcome.record is not None:
                    self.records.append(outcome.record)
            elif outcome.status == OutcomeStatus.invalid:
                self.invalid += 1
            else:
                self.errors += 1
