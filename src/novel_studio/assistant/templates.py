"""Canned suggestion text used by the offline content source."""

CONTINUATIONS = [
    "The lamp guttered as the last of the oil burned away, and in the sudden dark every small sound grew teeth. "
    "Whatever waited beyond the door had been patient for a long time.",
    "By the time the rain stopped, the decision had already been made. All that remained was to find the "
    "courage to say it out loud.",
    "Nobody noticed the stranger at first. He stood at the edge of the square with his hat in his hands, "
    "as if he had been asked to wait there and had forgotten by whom.",
    "It would have been easy to turn back. The road behind was familiar and the road ahead was not, "
    "which was precisely why she kept walking.",
]

DIALOGUES = [
    '"You told me it was finished," she said.\n\n'
    '"I told you I was finished with it," he answered. "That isn\'t the same thing."\n\n'
    '"Then what is it now?"\n\n'
    'He looked at the letter on the table for a long moment. "Unfinished business."',

    '"How long have you known?"\n\n'
    '"Long enough to stop being surprised."\n\n'
    '"And you said nothing."\n\n'
    '"I was waiting for you to ask the right question," the old woman said, and finally smiled.',
]

DESCRIPTIONS = [
    "The harbor woke slowly. Gulls argued over the fish market roofs, ropes creaked against wet bollards, "
    "and the smell of tar and salt hung low over the water where the fog had not yet decided to leave.",

    "The study had not been opened in years. Dust lay on the desk like a second varnish, a clock on the "
    "mantel had stopped at twenty past four, and a single glove rested beside the inkwell as though its "
    "owner meant to come back for it.",

    "Snow had erased the village's edges. Fences, paths and the low stone wall by the church had all "
    "become the same soft shape, and the only color left was the yellow square of a window where "
    "someone was still awake.",
]

PLOT_SOLUTIONS = [
    "Try turning the obstacle into evidence: the thing blocking your protagonist is the first real clue "
    "that someone arranged events on purpose. Solving the problem now also starts a new question.",

    "Let a minor character carry the answer. Someone introduced early for color knows the one fact that "
    "unlocks the situation, which rewards attentive readers and deepens a thin role.",

    "Make the fix cost something. The protagonist can get through, but only by giving up an advantage, "
    "an ally or a secret they were protecting, so the hole closes and the stakes rise at the same time.",
]

REWRITES = [
    "Here's a tighter version with more concrete detail:\n\n"
    "\"Her hands would not stay still. She folded the napkin, unfolded it, smoothed it flat against the "
    "table, and when he finally spoke she found she had torn it neatly in two.\"",

    "Here's a version that leans on subtext:\n\n"
    "\"'Fine,' he said, which was what he always said, and she heard in it every argument they had "
    "decided not to have.\"",

    "Here's a version with a slower, more atmospheric rhythm:\n\n"
    "\"The train pulled out without ceremony. She watched the platform shrink, the lamps blur, the "
    "town fold itself away into the hills, and only then did she let herself breathe.\"",
]

BRAINSTORMS = [
    "**Story possibilities to explore:**\n\n"
    "- What does your antagonist believe they are protecting?\n"
    "- Which secret, if revealed in this chapter, would change how readers see the opening?\n"
    "- Could the setting force a choice the characters would rather avoid?\n"
    "- Who benefits if the protagonist fails, and do they know it yet?",

    "**Scene development ideas:**\n\n"
    "- Start later: drop the reader into the middle of the argument.\n"
    "- Give each character in the scene a different goal.\n"
    "- End the scene on a new question rather than an answer.\n"
    "- Anchor the emotion in one physical detail.",
]

OUTLINES = [
    "**Suggested chapter outline: {topic}**\n\n"
    "**Hook** - open on a problem already in motion.\n\n"
    "**Setup** - establish where we are and what the character wants right now.\n\n"
    "**Complication** - something goes wrong, or goes right for the wrong reasons.\n\n"
    "**Turn** - a choice that cannot be undone.\n\n"
    "**Exit** - close one question and open the next.",

    "**Scene structure for: {topic}**\n\n"
    "1. Goal - what the viewpoint character wants in this scene\n"
    "2. Conflict - who or what stands in the way\n"
    "3. Disaster - how the attempt fails or costs more than expected\n"
    "4. Reaction - the emotional fallout\n"
    "5. Decision - the next move that carries us forward",
]

CONFLICTS = [
    "**Conflict ideas:**\n\n"
    "**Internal:** the protagonist wants two things that cannot both be true.\n\n"
    "**Interpersonal:** an ally's loyalty is quietly divided.\n\n"
    "**External:** a deadline arrives early and removes the safe option.",

    "**Ways to raise the tension:**\n\n"
    "- Put a clock on it.\n"
    "- Let the reader know something the characters don't.\n"
    "- Give the protagonist a near success that turns sour.\n"
    "- Make the cost of failure personal.",
]

ENDINGS = [
    "**Possible endings:**\n\n"
    "**Bittersweet:** the goal is reached, but the person who mattered most is no longer there to see it.\n\n"
    "**Open door:** the last page answers the main question and quietly asks a larger one.\n\n"
    "**Full circle:** return to the opening image and let the change in the character do the talking.",

    "**Closing beats to consider:**\n\n"
    "- A small, private moment after the big event.\n"
    "- An echo of a line from the first chapter, now meaning something else.\n"
    "- A final choice that shows who the character has become.",
]

SHORT_CONTENT_PREFACE = "The story begins with promise and uncertainty."
CONTINUE_PROMPT_TAIL = "The narrative bends toward this moment, where what was planned and what actually happens finally meet."
REWRITE_NEEDS_CONTENT = (
    "Please write some content in the editor first, then use the rewrite option to improve it."
)
UNKNOWN_KIND = "Please select a type of assistance."
