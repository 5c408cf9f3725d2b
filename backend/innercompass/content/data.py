"""Static module and topic definitions."""

from innercompass.content.catalog import Catalog, Module, Topic, TopicKind

VALUES_MODULE = Module(
    id="values",
    title="价值观",
    description="找到驱动你做出选择的内在准则。",
    icon="🧭",
    color="indigo",
    topics=(
        Topic(
            id="core-values",
            title="核心价值观",
            main_prompt="在你的生活中，哪些东西是你无论如何都不愿意放弃的？",
            intro="价值观往往藏在我们最坚持、最愤怒或最感动的时刻里。",
            questions=(
                "回想一个让你感到非常骄傲的决定，它体现了你的什么坚持？",
                "什么样的事情会让你感到强烈的不公平或愤怒？",
                "如果只能保留三个词来描述你想成为的人，你会选哪三个？",
            ),
        ),
        Topic(
            id="life-priorities",
            title="人生优先级",
            main_prompt="当时间和精力有限时，你会把它们留给什么？",
            questions=(
                "过去一个月里，你把最多的时间花在了哪里？这是你想要的吗？",
                "如果明年只能完成一件事，你希望是什么？",
                "你曾经为了什么而放弃过看起来很诱人的机会？",
            ),
        ),
        Topic(
            id="role-models",
            title="榜样的力量",
            main_prompt="你最欣赏的人身上有哪些品质？",
            intro="我们欣赏的品质，常常是自己内心渴望活出的样子。",
            questions=(
                "说出一到两位你敬佩的人，他们做了什么打动了你？",
                "他们身上的哪一种品质，是你希望自己也拥有的？",
            ),
        ),
    ),
)

TALENTS_MODULE = Module(
    id="talents",
    title="天赋",
    description="通过一组问题，发现你天生擅长、做起来毫不费力的事情。",
    icon="✨",
    color="amber",
    topics=(
        Topic(
            id="flow-moments",
            title="心流时刻",
            main_prompt="我们将通过几个问题，回顾那些让你忘记时间的时刻。",
            intro="请按照直觉回答，不需要追求完美的答案。",
            kind=TopicKind.QUESTIONNAIRE,
            questions=(
                "你做什么事情时，会完全忘记时间的流逝？",
                "在这些时刻里，你具体在做什么？请描述一个最近的例子。",
                "完成之后，你的感受是疲惫还是充满能量？",
            ),
        ),
        Topic(
            id="others-feedback",
            title="他人眼中的你",
            main_prompt="别人经常向你寻求什么样的帮助？",
            kind=TopicKind.QUESTIONNAIRE,
            questions=(
                "朋友或同事最常因为什么事情来找你？",
                "你曾经收到过的最让你意外的一句称赞是什么？",
                "有什么事情你觉得很简单，别人却觉得很难？",
            ),
        ),
        Topic(
            id="childhood-clues",
            title="童年线索",
            main_prompt="小时候的你，最喜欢做什么？",
            intro="天赋往往在很早的时候就已经露出了线索。",
            kind=TopicKind.QUESTIONNAIRE,
            questions=(
                "小时候你可以一个人玩很久的游戏或活动是什么？",
                "你记得自己第一次被夸奖“有天分”是因为什么？",
            ),
        ),
    ),
)

PASSIONS_MODULE = Module(
    id="passions",
    title="热情",
    description="探索让你充满能量、愿意持续投入的事情。",
    icon="🔥",
    color="rose",
    topics=(
        Topic(
            id="energy-sources",
            title="能量来源",
            main_prompt="什么样的活动会让你越做越有精神？",
            questions=(
                "最近一次让你兴奋到睡不着的事情是什么？",
                "你愿意在周末主动花时间做的事情有哪些？",
                "哪些话题可以让你滔滔不绝地聊上好几个小时？",
            ),
        ),
        Topic(
            id="curiosity-map",
            title="好奇心地图",
            main_prompt="你的好奇心总是把你带向哪里？",
            questions=(
                "你的浏览记录、书架或收藏夹里，反复出现的主题是什么？",
                "如果可以免费学习任何一门课程，你会选什么？",
            ),
        ),
        Topic(
            id="ideal-day",
            title="理想的一天",
            main_prompt="如果没有任何限制，你理想中的一天是怎样度过的？",
            intro="尽量具体地描述：在哪里、和谁在一起、做些什么。",
            questions=(
                "你在哪里醒来？醒来后第一件想做的事是什么？",
                "这一天中最让你期待的时刻是什么？",
                "这一天结束时，你希望自己有什么样的感受？",
            ),
        ),
    ),
)

CATALOG = Catalog((VALUES_MODULE, TALENTS_MODULE, PASSIONS_MODULE))
