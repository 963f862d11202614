from resume_optimizer.models.responses import OptimizationResult
from resume_optimizer.models.schemas.jd_analysis import JDAnalysis
from resume_optimizer.models.schemas.resume_document import ResumeDocument
from resume_optimizer.services.result_cache import ResultCache


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def _result(resume):
    return OptimizationResult(optimized_resume=resume, original_resume=resume, jd_analysis=JDAnalysis())


def test_make_key_depends_on_resume_and_jd():
    a = ResumeDocument(name="Jane Doe")
    b = ResumeDocument(name="John Doe")
    assert ResultCache.make_key(a, "jd") == ResultCache.make_key(a.model_copy(deep=True), "jd")
    assert ResultCache.make_key(a, "jd") != ResultCache.make_key(b, "jd")
    assert ResultCache.make_key(a, "jd") != ResultCache.make_key(a, "other jd")
    assert len(ResultCache.make_key(a, "")) == 64


def test_get_set_roundtrip():
    cache = ResultCache(ttl_seconds=60, clock=FakeClock())
    resume = ResumeDocument(name="Jane Doe")
    key = cache.make_key(resume, "jd")
    assert cache.get(key) is None
    cache.set(key, _result(resume))
    assert cache.get(key) is not None
    assert len(cache) == 1


def test_entries_expire_after_ttl():
    clock = FakeClock()
    cache = ResultCache(ttl_seconds=60, clock=clock)
    resume = ResumeDocument(name="Jane Doe")
    key = cache.make_key(resume, "jd")
    cache.set(key, _result(resume))

    clock.now += 59
    assert cache.get(key) is not None
    clock.now += 1
    assert cache.get(key) is None
    assert len(cache) == 0


def test_set_sweeps_expired_entries_never_read_again():
    clock = FakeClock()
    cache = ResultCache(ttl_seconds=60, clock=clock)
    first = ResumeDocument(name="Jane Doe")
    second = ResumeDocument(name="John Doe")
    cache.set(cache.make_key(first, "jd"), _result(first))
    clock.now += 30
    cache.set(cache.make_key(second, "jd"), _result(second))
    assert len(cache) == 2

    clock.now += 30
    cache.set(cache.make_key(first, "other jd"), _result(first))
    assert len(cache) == 2
    assert cache.get(cache.make_key(first, "jd")) is None
    assert cache.get(cache.make_key(second, "jd")) is not None


def test_set_is_idempotent():
    cache = ResultCache(clock=FakeClock())
    resume = ResumeDocument(name="Jane Doe")
    key = cache.make_key(resume, "jd")
    cache.set(key, _result(resume))
    cache.set(key, _result(resume))
    assert len(cache) == 1


def test_default_ttl_is_one_day():
    assert ResultCache().ttl_seconds == 86400


def test_clear():
    cache = ResultCache(clock=FakeClock())
    resume = ResumeDocument()
    cache.set(cache.make_key(resume, ""), _result(resume))
    cache.clear()
    assert len(cache) == 0
