"""
农场顾问 - 根据玩家状态给出一句提示

返回值只用于展示，不会写回引擎状态
"""
import asyncio
import logging
import random
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Optional, Protocol

logger = logging.getLogger(__name__)

DEFAULT_ADVICE = "今天天气不错，适合种地！"

# 本地提示库
FARM_ADVICE_DATABASE = [
    "阳光正好！最适合打理田地。",
    "记得给作物浇水，成熟速度快一倍！",
    "火龙果是10级农夫的宝藏。",
    "多种几样作物，钱包才会鼓起来。",
    "你的农场今天是全村最漂亮的！",
    "养几只母鸡，鸡蛋在市场上很抢手。",
    "攒够金币就去开垦上锁的地块吧。",
    "小麦适合起步，玉米赚得更多。",
    "土地湿润肥沃，抓紧时间播种！",
    "考虑养一头奶牛？牛奶的价钱很不错。",
    "田地规划得整齐，收获起来也更快。",
    "5级可以种植更值钱的南瓜！",
    "库存里常备种子，别让地块空着。",
    "卖动物产品是致富的捷径。",
    "每一次收获都让你离农场大师更近一步。",
]

# 线程池用于异步调用外部顾问（防止阻塞事件循环）
_executor = ThreadPoolExecutor(max_workers=1)


class Advisor(Protocol):
    def advise(self, currency: int, level: int, inventory: Dict[str, int]) -> str:  # pragma: no cover
        ...


class StaticAdvisor:
    """本地规则 + 随机提示"""

    def __init__(self, rng: Optional[random.Random] = None, top_crop: str = 'dragon_fruit', top_level: int = 10):
        self.rng = rng or random.Random()
        self.top_crop = top_crop
        self.top_level = top_level

    def advise(self, currency: int, level: int, inventory: Dict[str, int]) -> str:
        if level == 1 and currency < 10:
            return "提示：先种小麦，让经济转起来！"
        if level >= self.top_level and not (inventory or {}).get(self.top_crop):
            return "太棒了！你已经可以种植火龙果，这是最值钱的作物！"
        if currency > 1000 and level < 5:
            return "你的金币很多！不如专心积累经验升级吧？"
        return self.rng.choice(FARM_ADVICE_DATABASE)


def advise_safely(advisor: Optional[Advisor], currency: int, level: int, inventory: Dict[str, int],
                  default: str = DEFAULT_ADVICE) -> str:
    """顾问不可用、抛异常或返回空内容时使用默认提示"""
    if advisor is None:
        return default
    try:
        text = advisor.advise(currency, level, dict(inventory))
    except Exception as e:
        logger.warning("advisor unavailable: %s", e)
        return default
    if not isinstance(text, str) or not text.strip():
        return default
    return text.strip()


async def fetch_advice(advisor: Optional[Advisor], currency: int, level: int, inventory: Dict[str, int],
                       timeout: float = 2.0, default: str = DEFAULT_ADVICE) -> str:
    """在线程池中调用顾问，超时返回默认提示"""
    loop = asyncio.get_running_loop()
    try:
        return await asyncio.wait_for(
            loop.run_in_executor(_executor, lambda: advise_safely(advisor, currency, level, inventory, default)),
            timeout,
        )
    except asyncio.TimeoutError:
        logger.warning("advisor timed out after %.1fs", timeout)
        return default
