"""The four prompts shown to test takers, in answer order."""

QUESTIONS: tuple[str, ...] = (
    "Part 1: Short Writing Test\n"
    "Write 3–4 sentences answering this:\n"
    "“If you suddenly had a free week with no responsibilities, how would you spend it?”",

    "Part 2: Idioms & Expressions\n"
    "Tell me what this idiom means in your own words:\n"
    "“That project was a blessing in disguise.”",

    "Part 3: Word Choice\n"
    "Choose the option that sounds most natural:\n"
    "- Let’s meet in the evening / on the evening.\n"
    "- She suggested to go / going for a walk.\n"
    "- I’m looking forward to meet / to meeting you.",

    "Part 4: Subtle Grammar\n"
    "Fill in the blank:\n"
    "“If I ___ known about the traffic, I would have left earlier.”",
)
